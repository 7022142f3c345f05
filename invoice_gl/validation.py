"""Invoice input validation and GL balance checks.

Exposes:
- validate_invoice_data(...) -> None, raising the first violation
- collect_invoice_errors(...) -> every violation, without raising
- require_customer(customer_ref) -> None, raising MissingCustomerError
- summarize_balance(lines) / assert_balanced(lines)
"""

from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from .errors import (
    EmptyLineItemsError,
    InvalidDateError,
    InvalidQuantityError,
    InvoiceGLError,
    InvoiceValidationErrors,
    LedgerImbalanceError,
    LineAmountMismatchError,
    MissingCustomerError,
    NegativeUnitAmountError,
    NonPositiveTotalError,
    TotalMismatchError,
)
from .models import (
    BalanceSummary,
    GLTransactionLine,
    InvoiceLineItem,
    Side,
    coerce_line_item,
    parse_date,
    parse_decimal,
)


# =============================================================================
# Configuration
# =============================================================================

AMOUNT_TOLERANCE = Decimal("0.01")


# =============================================================================
# Utility Functions
# =============================================================================

def to_decimal(value) -> Optional[Decimal]:
    """Convert value to Decimal."""
    return parse_decimal(value)


def amounts_match(
    a: Optional[Decimal],
    b: Optional[Decimal],
    tolerance: Decimal = AMOUNT_TOLERANCE,
) -> bool:
    """Check if two amounts match within tolerance."""
    if a is None or b is None:
        return False
    return abs(a - b) <= tolerance


def sum_line_amounts(line_items: Iterable[InvoiceLineItem]) -> Decimal:
    """Sum of line_amount across invoice line items."""
    total = Decimal("0")
    for item in line_items:
        total += item.line_amount
    return total


# =============================================================================
# Individual Checks
# =============================================================================

def _check_customer(customer_ref: Any) -> Optional[InvoiceGLError]:
    if customer_ref is None or not str(customer_ref).strip():
        return MissingCustomerError(
            "Validation failed: customer reference is required",
            {"customer_ref": customer_ref},
        )
    return None


def _check_total(total_amount: Any) -> Optional[InvoiceGLError]:
    try:
        total = to_decimal(total_amount)
    except ValueError:
        total = None
    if not isinstance(total, Decimal) or not total.is_finite() or total <= 0:
        return NonPositiveTotalError(
            f"Validation failed: total amount must be greater than 0, got {total_amount}",
            {"total_amount": total_amount},
        )
    return None


def _check_due_date(due_date: Any) -> Optional[InvoiceGLError]:
    try:
        parse_date(due_date)
    except ValueError:
        return InvalidDateError(
            f"Validation failed: due date is not a valid date: {due_date!r}",
            {"due_date": due_date},
        )
    return None


def _check_line_item(index: int, item: InvoiceLineItem) -> List[InvoiceGLError]:
    """Quantity, unit amount and line arithmetic for one item (1-based index in messages)."""
    errors: List[InvoiceGLError] = []
    position = index + 1

    if item.quantity <= 0:
        errors.append(InvalidQuantityError(
            f"Validation failed: line {position} quantity must be greater than 0, got {item.quantity}",
            {"line": position, "quantity": item.quantity},
        ))

    if item.unit_amount < 0:
        errors.append(NegativeUnitAmountError(
            f"Validation failed: line {position} unit amount cannot be negative, got {item.unit_amount}",
            {"line": position, "unit_amount": item.unit_amount},
        ))

    expected = item.quantity * item.unit_amount
    if not amounts_match(item.line_amount, expected):
        errors.append(LineAmountMismatchError(
            f"Validation failed: line {position} amount {item.line_amount} "
            f"does not equal quantity x unit amount ({expected})",
            {
                "line": position,
                "expected": expected,
                "actual": item.line_amount,
                "difference": abs(item.line_amount - expected),
            },
        ))

    return errors


def _check_line_total(items: Sequence[InvoiceLineItem], total_amount: Any) -> Optional[InvoiceGLError]:
    total = to_decimal(total_amount)
    line_sum = sum_line_amounts(items)
    if not amounts_match(line_sum, total):
        return TotalMismatchError(
            f"Validation failed: line items sum to {line_sum} but invoice total is {total}",
            {
                "expected": total,
                "actual": line_sum,
                "difference": abs(line_sum - total),
            },
        )
    return None


# =============================================================================
# Public API
# =============================================================================

def require_customer(customer_ref: Any) -> None:
    """
    Reject an empty customer reference.

    Raises:
        MissingCustomerError: If customer_ref is None or blank
    """
    error = _check_customer(customer_ref)
    if error is not None:
        raise error


def collect_invoice_errors(
    customer_ref: Any,
    total_amount: Any,
    due_date: Any,
    line_items: Optional[Sequence[Any]],
) -> List[InvoiceGLError]:
    """
    Run every invoice rule and return all violations.

    Args:
        customer_ref: Customer entity reference
        total_amount: Invoice total
        due_date: Due date (date, datetime or string)
        line_items: InvoiceLineItem objects or dicts

    Returns:
        List of errors in rule order; empty when the invoice is valid

    Raises:
        pydantic.ValidationError: If a line item dict cannot be read at all
    """
    errors: List[InvoiceGLError] = []

    for error in (
        _check_customer(customer_ref),
        _check_total(total_amount),
        _check_due_date(due_date),
    ):
        if error is not None:
            errors.append(error)

    if not line_items:
        errors.append(EmptyLineItemsError(
            "Validation failed: invoice must have at least one line item",
            {"line_count": 0},
        ))
        return errors

    items = [coerce_line_item(item) for item in line_items]
    for idx, item in enumerate(items):
        errors.extend(_check_line_item(idx, item))

    total_is_valid = not any(isinstance(e, NonPositiveTotalError) for e in errors)
    if total_is_valid:
        mismatch = _check_line_total(items, total_amount)
        if mismatch is not None:
            errors.append(mismatch)

    return errors


def validate_invoice_data(
    customer_ref: Any,
    total_amount: Any,
    due_date: Any,
    line_items: Optional[Sequence[Any]],
    collect: bool = False,
) -> None:
    """
    Validate invoice input before any GL lines are produced.

    Fails fast with the first violation. With `collect=True`, every rule is
    run and all violations are raised together as InvoiceValidationErrors.

    Raises:
        MissingCustomerError, NonPositiveTotalError, InvalidDateError,
        EmptyLineItemsError, InvalidQuantityError, NegativeUnitAmountError,
        LineAmountMismatchError, TotalMismatchError, InvoiceValidationErrors
    """
    if collect:
        errors = collect_invoice_errors(customer_ref, total_amount, due_date, line_items)
        if errors:
            raise InvoiceValidationErrors(errors)
        return

    for error in (
        _check_customer(customer_ref),
        _check_total(total_amount),
        _check_due_date(due_date),
    ):
        if error is not None:
            raise error

    if not line_items:
        raise EmptyLineItemsError(
            "Validation failed: invoice must have at least one line item",
            {"line_count": 0},
        )

    items = [coerce_line_item(item) for item in line_items]
    for idx, item in enumerate(items):
        item_errors = _check_line_item(idx, item)
        if item_errors:
            raise item_errors[0]

    mismatch = _check_line_total(items, total_amount)
    if mismatch is not None:
        raise mismatch


# =============================================================================
# Balance Checks
# =============================================================================

def summarize_balance(lines: Iterable[GLTransactionLine]) -> BalanceSummary:
    """Total debits and credits across GL lines."""
    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for line in lines:
        if line.side == Side.DR:
            total_debit += line.amount
        else:
            total_credit += line.amount

    return BalanceSummary(
        total_debit=total_debit,
        total_credit=total_credit,
        is_balanced=amounts_match(total_debit, total_credit),
    )


def assert_balanced(lines: Iterable[GLTransactionLine]) -> BalanceSummary:
    """
    Verify DR = CR within tolerance.

    Raises:
        LedgerImbalanceError: With both totals and the difference
    """
    summary = summarize_balance(lines)
    if not summary.is_balanced:
        raise LedgerImbalanceError(
            f"Ledger Imbalance: debits {summary.total_debit} != credits {summary.total_credit}",
            {
                "total_debit": summary.total_debit,
                "total_credit": summary.total_credit,
                "difference": summary.difference,
            },
        )
    return summary
