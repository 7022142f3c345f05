"""
GL Account Registry and Payment-Method Router Tests

Validates:
1. The invoice-flow accounts are registered with the right classification
2. Account smart codes follow the six-segment convention
3. The registry cannot be mutated
4. Payment methods route to cash, bank and card accounts with no fallback
"""

import pytest

from invoice_gl import (
    GL_ACCOUNTS,
    AccountType,
    ErrorKind,
    InvalidPaymentMethodError,
    PaymentMethod,
    Side,
    UnknownAccountError,
    get_gl_account,
    is_valid_smart_code,
    list_gl_accounts,
    resolve_payment_account,
)


class TestGLAccountRegistry:
    """Test the static chart of accounts."""

    @pytest.mark.parametrize("code,name,account_type,normal_balance", [
        ("120000", "Accounts Receivable", AccountType.ASSET, Side.DR),
        ("400000", "Service Revenue", AccountType.REVENUE, Side.CR),
        ("110000", "Cash on Hand", AccountType.ASSET, Side.DR),
        ("110100", "Bank Account", AccountType.ASSET, Side.DR),
        ("110200", "Card Payment Clearing", AccountType.ASSET, Side.DR),
    ])
    def test_invoice_accounts_registered(self, code, name, account_type, normal_balance):
        """Each invoice-flow account has its name, type and normal balance."""
        account = get_gl_account(code)
        assert account.code == code
        assert account.name == name
        assert account.account_type == account_type
        assert account.normal_balance == normal_balance

    def test_descriptive_tags_follow_convention(self):
        """Account tags are uppercase segments with a lowercase version suffix."""
        for account in list_gl_accounts():
            assert is_valid_smart_code(account.descriptive_tag), account.descriptive_tag
            assert ".GL.ACCOUNT." in account.descriptive_tag

    def test_unknown_account_raises(self):
        """Unknown codes fail instead of falling back to a default."""
        with pytest.raises(UnknownAccountError) as exc_info:
            get_gl_account("999999")
        assert exc_info.value.kind == ErrorKind.UNKNOWN_ACCOUNT
        assert exc_info.value.details["code"] == "999999"

    def test_registry_is_read_only(self):
        """The registry mapping rejects writes."""
        with pytest.raises(TypeError):
            GL_ACCOUNTS["999999"] = GL_ACCOUNTS["120000"]

    def test_accounts_are_immutable(self):
        """GLAccount entries are frozen."""
        account = get_gl_account("120000")
        with pytest.raises(AttributeError):
            account.name = "Renamed"

    def test_list_is_ordered_by_code(self):
        codes = [a.code for a in list_gl_accounts()]
        assert codes == sorted(codes)


class TestPaymentMethodRouter:
    """Test payment-method to GL account routing."""

    @pytest.mark.parametrize("method,expected", [
        ("CASH", "110000"),
        ("BANK_TRANSFER", "110100"),
        ("CARD", "110200"),
        ("CHEQUE", "110100"),
    ])
    def test_routes_each_method(self, method, expected):
        assert resolve_payment_account(method) == expected

    def test_accepts_enum_members(self):
        assert resolve_payment_account(PaymentMethod.CARD) == "110200"

    def test_mapping_is_idempotent(self):
        """Repeated lookups return the same account."""
        for method in ("CASH", "BANK_TRANSFER", "CARD", "CHEQUE"):
            assert resolve_payment_account(method) == resolve_payment_account(method)

    @pytest.mark.parametrize("method", ["UNKNOWN", "cash", "Card", "", None])
    def test_rejects_unknown_tokens(self, method):
        """Unknown and wrongly-cased tokens are rejected."""
        with pytest.raises(InvalidPaymentMethodError) as exc_info:
            resolve_payment_account(method)
        assert exc_info.value.kind == ErrorKind.INVALID_PAYMENT_METHOD
        assert "Invalid Payment Method" in str(exc_info.value)
