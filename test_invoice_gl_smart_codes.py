"""
Smart Code and Configuration Tests

Validates:
1. Invoice smart codes per operation
2. Module qualification to the six-segment form
3. Smart code validation rules
4. Settings loaded from environment variables
"""

import pytest

from gl_core.config import Settings, get_settings, reset_settings
from invoice_gl import (
    InvoiceOperation,
    build_invoice_smart_code,
    is_valid_smart_code,
    qualify_smart_code,
)


HERA_ENV_VARS = [
    "HERA_SMART_CODE_DOMAIN",
    "HERA_SMART_CODE_VERSION",
    "HERA_DEFAULT_CURRENCY",
    "HERA_LOG_LEVEL",
    "HERA_LOG_JSON",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run each test against default settings."""
    for var in HERA_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


class TestInvoiceSmartCodes:
    """Test smart code construction."""

    @pytest.mark.parametrize("operation,expected", [
        (InvoiceOperation.CREATION, "HERA.TRANSACTION.INVOICE.CREATION.v1"),
        (InvoiceOperation.PAYMENT, "HERA.TRANSACTION.INVOICE.PAYMENT.v1"),
        (InvoiceOperation.CANCELLATION, "HERA.TRANSACTION.INVOICE.CANCELLATION.v1"),
    ])
    def test_default_codes(self, operation, expected):
        assert build_invoice_smart_code(operation) == expected

    def test_accepts_operation_name(self):
        assert build_invoice_smart_code("CREATION").endswith("INVOICE.CREATION.v1")

    def test_explicit_version(self):
        assert build_invoice_smart_code("PAYMENT", version=2) == "HERA.TRANSACTION.INVOICE.PAYMENT.v2"

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            build_invoice_smart_code("REFUND")

    def test_version_below_one(self):
        with pytest.raises(ValueError):
            build_invoice_smart_code("CREATION", version=0)

    def test_deterministic(self):
        assert build_invoice_smart_code("CREATION") == build_invoice_smart_code("CREATION")

    def test_version_and_domain_from_environment(self, monkeypatch):
        monkeypatch.setenv("HERA_SMART_CODE_VERSION", "3")
        monkeypatch.setenv("HERA_SMART_CODE_DOMAIN", "acme")
        reset_settings()
        assert build_invoice_smart_code("CREATION") == "ACME.TRANSACTION.INVOICE.CREATION.v3"


class TestSmartCodeQualification:
    """Test module segment insertion and validation."""

    def test_qualified_code_has_six_segments(self):
        code = qualify_smart_code(build_invoice_smart_code("CREATION"), "salon")
        assert code == "HERA.SALON.TRANSACTION.INVOICE.CREATION.v1"
        assert is_valid_smart_code(code)

    def test_bare_invoice_code_is_too_short(self):
        code = build_invoice_smart_code("CREATION")
        assert not is_valid_smart_code(code)
        assert is_valid_smart_code(code, min_segments=5)

    @pytest.mark.parametrize("module", ["", "SA-LON", "a.b"])
    def test_invalid_module_segment(self, module):
        with pytest.raises(ValueError):
            qualify_smart_code("HERA.TRANSACTION.INVOICE.CREATION.v1", module)

    def test_invalid_code_without_segments(self):
        with pytest.raises(ValueError):
            qualify_smart_code("HERA", "SALON")

    @pytest.mark.parametrize("code", [
        "HERA.SALON.TRANSACTION.INVOICE.CREATION.V1",
        "HERA.SALON.TRANSACTION.INVOICE.CREATION",
        "hera.salon.transaction.invoice.creation.v1",
        "HERA.SALON..INVOICE.CREATION.v1",
        None,
    ])
    def test_rejects_malformed_codes(self, code):
        assert not is_valid_smart_code(code)


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = get_settings()
        assert settings == Settings()
        assert settings.smart_code_domain == "HERA"
        assert settings.default_currency == "AED"
        assert settings.log_json is False

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HERA_DEFAULT_CURRENCY", "usd")
        monkeypatch.setenv("HERA_LOG_LEVEL", "debug")
        monkeypatch.setenv("HERA_LOG_JSON", "true")
        settings = Settings.from_env()
        assert settings.default_currency == "USD"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    @pytest.mark.parametrize("value", ["abc", "0", "-2"])
    def test_invalid_version(self, monkeypatch, value):
        monkeypatch.setenv("HERA_SMART_CODE_VERSION", value)
        with pytest.raises(ValueError):
            Settings.from_env()

    @pytest.mark.parametrize("value", ["", "   ", "HERA.X", "HE-RA"])
    def test_invalid_domain(self, monkeypatch, value):
        """The domain must be one segment or every smart code would be malformed."""
        monkeypatch.setenv("HERA_SMART_CODE_DOMAIN", value)
        with pytest.raises(ValueError, match="HERA_SMART_CODE_DOMAIN"):
            Settings.from_env()
