"""
Invoice Validation Tests

Validates:
1. Each rule raises its own error kind with expected/actual context
2. Fail-fast order of the rules
3. Collect-all mode reports every violation
4. Balance summaries and the DR = CR guard
"""

from datetime import date
from decimal import Decimal

import pytest

from invoice_gl import (
    EmptyLineItemsError,
    ErrorKind,
    InputShapeError,
    ArithmeticMismatchError,
    InvalidDateError,
    InvalidQuantityError,
    InvoiceLineItem,
    InvoiceValidationErrors,
    LedgerImbalanceError,
    LineAmountMismatchError,
    MissingCustomerError,
    NegativeUnitAmountError,
    NonPositiveTotalError,
    TotalMismatchError,
    amounts_match,
    assert_balanced,
    collect_invoice_errors,
    generate_invoice_creation_lines,
    summarize_balance,
    validate_invoice_data,
)
from invoice_gl.models import GLLineData, GLTransactionLine, AccountType, Side


def item(quantity, unit_amount, line_amount, description="Service"):
    return {
        "description": description,
        "quantity": quantity,
        "unit_amount": unit_amount,
        "line_amount": line_amount,
    }


VALID_ITEMS = [item(1, 450, 450), item(1, 300, 300)]


class TestValidInvoices:
    """Valid input passes silently."""

    def test_valid_invoice(self):
        assert validate_invoice_data("C1", 750, "2025-03-01", VALID_ITEMS) is None

    def test_accepts_models_dates_and_strings(self):
        items = [
            InvoiceLineItem(description="Cut", quantity="2", unit_amount="$1,250.00", line_amount="2500"),
        ]
        validate_invoice_data("C1", "2,500.00", date(2025, 3, 1), items)

    def test_accepts_camel_case_keys(self):
        items = [{"description": "Cut", "quantity": 3, "unitAmount": "33.33", "lineAmount": "99.99"}]
        validate_invoice_data("C1", "99.99", "03/01/2025", items)

    def test_line_rounding_within_tolerance(self):
        """A line off by exactly one cent still validates."""
        validate_invoice_data("C1", "100.01", "2025-03-01", [item(3, "33.33", "100.00"), item(1, "0.01", "0.01")])

    def test_zero_unit_amount_allowed(self):
        validate_invoice_data("C1", 100, "2025-03-01", [item(1, 100, 100), item(2, 0, 0, "Complimentary")])


class TestFailFastValidation:
    """Each rule raises its own error."""

    @pytest.mark.parametrize("customer", ["", "   ", None])
    def test_missing_customer(self, customer):
        with pytest.raises(MissingCustomerError) as exc_info:
            validate_invoice_data(customer, 750, "2025-03-01", VALID_ITEMS)
        assert exc_info.value.kind == ErrorKind.MISSING_CUSTOMER
        assert "Validation" in str(exc_info.value)

    @pytest.mark.parametrize("total", [0, -10, "0.00", "abc", None])
    def test_non_positive_total(self, total):
        with pytest.raises(NonPositiveTotalError):
            validate_invoice_data("C1", total, "2025-03-01", VALID_ITEMS)

    @pytest.mark.parametrize("due", ["not-a-date", "2025-02-30", "", None, 12345])
    def test_invalid_due_date(self, due):
        with pytest.raises(InvalidDateError) as exc_info:
            validate_invoice_data("C1", 750, due, VALID_ITEMS)
        assert exc_info.value.kind == ErrorKind.INVALID_DATE

    @pytest.mark.parametrize("items", [[], None])
    def test_empty_line_items(self, items):
        with pytest.raises(EmptyLineItemsError):
            validate_invoice_data("C1", 750, "2025-03-01", items)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_invalid_quantity(self, quantity):
        with pytest.raises(InvalidQuantityError) as exc_info:
            validate_invoice_data("C1", 750, "2025-03-01", [item(quantity, 750, 750)])
        assert exc_info.value.details["line"] == 1

    def test_negative_unit_amount(self):
        with pytest.raises(NegativeUnitAmountError):
            validate_invoice_data("C1", 10, "2025-03-01", [item(1, 20, 20), item(1, -10, -10)])

    def test_line_amount_mismatch_carries_context(self):
        with pytest.raises(LineAmountMismatchError) as exc_info:
            validate_invoice_data("C1", 250, "2025-03-01", [item(2, 100, 250)])
        details = exc_info.value.details
        assert details["expected"] == "200"
        assert details["actual"] == "250"
        assert details["difference"] == "50"

    def test_total_mismatch(self):
        """Items summing to 100 with a total of 200 are rejected."""
        with pytest.raises(TotalMismatchError) as exc_info:
            validate_invoice_data("C1", 200, "2025-03-01", [item(1, 100, 100)])
        assert exc_info.value.details["expected"] == "200"
        assert exc_info.value.details["actual"] == "100"

    def test_rule_order_is_fail_fast(self):
        """The customer rule fires before the total rule."""
        with pytest.raises(MissingCustomerError):
            validate_invoice_data("", 0, "bad", [])

    def test_error_families(self):
        assert issubclass(MissingCustomerError, InputShapeError)
        assert issubclass(InvalidQuantityError, InputShapeError)
        assert issubclass(TotalMismatchError, ArithmeticMismatchError)
        assert issubclass(LedgerImbalanceError, ArithmeticMismatchError)


class TestCollectedValidation:
    """Collect-all mode reports every violation."""

    def test_collects_all_violations(self):
        errors = collect_invoice_errors("", 0, "bad", [item(0, -5, 10)])
        kinds = [e.kind for e in errors]
        assert kinds == [
            ErrorKind.MISSING_CUSTOMER,
            ErrorKind.NON_POSITIVE_TOTAL,
            ErrorKind.INVALID_DATE,
            ErrorKind.INVALID_QUANTITY,
            ErrorKind.NEGATIVE_UNIT_AMOUNT,
            ErrorKind.LINE_AMOUNT_MISMATCH,
        ]

    def test_valid_invoice_has_no_errors(self):
        assert collect_invoice_errors("C1", 750, "2025-03-01", VALID_ITEMS) == []

    def test_collect_flag_raises_aggregate(self):
        with pytest.raises(InvoiceValidationErrors) as exc_info:
            validate_invoice_data("C1", 200, "2025-03-01", [item(1, 100, 100), item(0, 5, 0)], collect=True)
        err = exc_info.value
        assert [e.kind for e in err.errors] == [ErrorKind.INVALID_QUANTITY, ErrorKind.TOTAL_MISMATCH]
        assert err.to_dict()["details"]["kinds"] == ["INVALID_QUANTITY", "TOTAL_MISMATCH"]
        assert len(err.to_dict()["errors"]) == 2

    def test_empty_items_stop_collection(self):
        errors = collect_invoice_errors("C1", 10, "2025-03-01", [])
        assert [e.kind for e in errors] == [ErrorKind.EMPTY_LINE_ITEMS]


def gl_line(number, side, amount, code="120000"):
    return GLTransactionLine(
        line_number=number,
        description="test",
        line_data=GLLineData(
            gl_account_code=code,
            gl_account_name="Test",
            side=side,
            account_type=AccountType.ASSET,
            amount=Decimal(str(amount)),
            descriptive_tag="HERA.FINANCE.GL.ACCOUNT.ASSET.TEST.v1",
        ),
    )


class TestBalanceChecks:
    """DR = CR within one cent."""

    def test_amounts_match_tolerance(self):
        assert amounts_match(Decimal("100.00"), Decimal("100.01"))
        assert not amounts_match(Decimal("100.00"), Decimal("100.02"))
        assert not amounts_match(None, Decimal("1"))

    def test_summary_of_generated_lines(self):
        lines = generate_invoice_creation_lines(VALID_ITEMS, 750, "C1")
        summary = summarize_balance(lines)
        assert summary.total_debit == Decimal("750")
        assert summary.total_credit == Decimal("750")
        assert summary.is_balanced
        assert summary.difference == Decimal("0")

    def test_imbalance_raises_with_totals(self):
        lines = [gl_line(1, Side.DR, "100.00"), gl_line(2, Side.CR, "99.50")]
        with pytest.raises(LedgerImbalanceError) as exc_info:
            assert_balanced(lines)
        details = exc_info.value.details
        assert details["total_debit"] == "100.00"
        assert details["total_credit"] == "99.50"
        assert details["difference"] == "0.50"

    def test_one_cent_difference_is_balanced(self):
        lines = [gl_line(1, Side.DR, "100.00"), gl_line(2, Side.CR, "99.99")]
        assert assert_balanced(lines).is_balanced
