"""
GL Line Generator

Turns invoice events into balanced double-entry GL lines:
1. Invoice creation  - DR Accounts Receivable / CR Service Revenue
2. Invoice payment   - DR Cash, Bank or Card Clearing / CR Accounts Receivable
3. Invoice cancellation - DR Service Revenue / CR Accounts Receivable

Every generator re-checks DR = CR on what it built before returning, so a
future extra line (tax, discount) that breaks balance fails here instead of
being posted.
"""

from decimal import Decimal
from typing import Any, List, Optional, Sequence

from gl_core.observability.logging import get_logger

from .accounts import ACCOUNTS_RECEIVABLE, SERVICE_REVENUE, get_gl_account
from .errors import AmountMismatchError, EmptyLineItemsError, NonPositiveTotalError
from .models import (
    GLLineData,
    GLTransactionLine,
    PostingContext,
    Side,
    coerce_line_item,
    parse_decimal,
)
from .payments import resolve_payment_account
from .validation import amounts_match, assert_balanced, sum_line_amounts

logger = get_logger(__name__)


def _gl_line(
    line_number: int,
    account_code: str,
    side: Side,
    amount: Decimal,
    description: str,
    entity_ref: Optional[str] = None,
    payment_method: Optional[str] = None,
    invoice_transaction_ref: Optional[str] = None,
    context: Optional[PostingContext] = None,
) -> GLTransactionLine:
    """Build one GL line against a registered account."""
    account = get_gl_account(account_code)
    context = context or PostingContext()

    return GLTransactionLine(
        line_number=line_number,
        description=description,
        entity_ref=entity_ref,
        line_data=GLLineData(
            gl_account_code=account.code,
            gl_account_name=account.name,
            side=side,
            account_type=account.account_type,
            amount=amount,
            descriptive_tag=account.descriptive_tag,
            payment_method=payment_method,
            invoice_transaction_ref=invoice_transaction_ref,
            currency=context.currency,
            fiscal_year=context.fiscal_year,
            fiscal_period=context.fiscal_period,
        ),
    )


def _positive_amount(value: Any, label: str) -> Decimal:
    try:
        amount = parse_decimal(value)
    except ValueError:
        amount = None
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise NonPositiveTotalError(
            f"{label} must be greater than 0, got {value}",
            {label.lower().replace(" ", "_"): value},
        )
    return amount


# =============================================================================
# Invoice Creation
# =============================================================================

def generate_invoice_creation_lines(
    line_items: Sequence[Any],
    total_amount: Any,
    customer_ref: str,
    context: Optional[PostingContext] = None,
) -> List[GLTransactionLine]:
    """
    Generate the GL lines recording a new customer invoice.

    Args:
        line_items: InvoiceLineItem objects or dicts
        total_amount: Invoice total
        customer_ref: Customer entity linked to the receivable
        context: Optional currency / fiscal period stamping

    Returns:
        [DR 120000 total (entity_ref=customer), CR 400000 total]

    Raises:
        EmptyLineItemsError: No line items
        NonPositiveTotalError: Total is not greater than 0
        AmountMismatchError: Line amounts do not sum to the total
        LedgerImbalanceError: Generated lines do not balance
    """
    items = [coerce_line_item(item) for item in line_items or []]
    if not items:
        raise EmptyLineItemsError(
            "Invoice must have at least one line item",
            {"line_count": 0},
        )
    total = _positive_amount(total_amount, "Total amount")
    line_sum = sum_line_amounts(items)

    if not amounts_match(line_sum, total):
        raise AmountMismatchError(
            f"Amount Mismatch: line items sum to {line_sum} but invoice total is {total}",
            {
                "expected": total,
                "actual": line_sum,
                "difference": abs(line_sum - total),
            },
        )

    lines = [
        _gl_line(
            line_number=1,
            account_code=ACCOUNTS_RECEIVABLE,
            side=Side.DR,
            amount=total,
            description=f"Invoice receivable - {customer_ref}",
            entity_ref=customer_ref,
            context=context,
        ),
        _gl_line(
            line_number=2,
            account_code=SERVICE_REVENUE,
            side=Side.CR,
            amount=total,
            description=f"Service revenue - {len(items)} line item(s)",
            context=context,
        ),
    ]

    balance = assert_balanced(lines)
    logger.debug(
        "Generated invoice creation lines",
        extra_fields={"total_debit": balance.total_debit, "total_credit": balance.total_credit},
    )
    return lines


# =============================================================================
# Invoice Payment
# =============================================================================

def generate_invoice_payment_lines(
    payment_amount: Any,
    payment_method: str,
    customer_ref: str,
    invoice_ref: str,
    context: Optional[PostingContext] = None,
) -> List[GLTransactionLine]:
    """
    Generate the GL lines recording a full, single-method invoice payment.

    Split payments are recorded by calling this once per payment method.

    Args:
        payment_amount: Amount received
        payment_method: CASH, BANK_TRANSFER, CARD or CHEQUE
        customer_ref: Customer entity whose receivable is reduced
        invoice_ref: Transaction reference of the invoice being paid
        context: Optional currency / fiscal period stamping

    Returns:
        [DR cash/bank/card account, CR 120000 (entity_ref=customer)]

    Raises:
        InvalidPaymentMethodError: Unknown payment-method token
        NonPositiveTotalError: Payment amount is not greater than 0
        LedgerImbalanceError: Generated lines do not balance
    """
    receiving_account = resolve_payment_account(payment_method)
    amount = _positive_amount(payment_amount, "Payment amount")
    method = getattr(payment_method, "value", payment_method)

    lines = [
        _gl_line(
            line_number=1,
            account_code=receiving_account,
            side=Side.DR,
            amount=amount,
            description=f"Payment received via {method}",
            payment_method=method,
            context=context,
        ),
        _gl_line(
            line_number=2,
            account_code=ACCOUNTS_RECEIVABLE,
            side=Side.CR,
            amount=amount,
            description=f"Receivable settled - {invoice_ref}",
            entity_ref=customer_ref,
            invoice_transaction_ref=invoice_ref,
            context=context,
        ),
    ]

    balance = assert_balanced(lines)
    logger.debug(
        "Generated invoice payment lines",
        extra_fields={
            "payment_method": method,
            "gl_account_code": receiving_account,
            "total_debit": balance.total_debit,
        },
    )
    return lines


# =============================================================================
# Invoice Cancellation
# =============================================================================

def generate_invoice_cancellation_lines(
    total_amount: Any,
    customer_ref: str,
    invoice_ref: str,
    context: Optional[PostingContext] = None,
) -> List[GLTransactionLine]:
    """
    Generate the GL lines reversing an invoice's creation entry.

    Returns:
        [DR 400000 total, CR 120000 total (entity_ref=customer)]

    Raises:
        NonPositiveTotalError: Total is not greater than 0
        LedgerImbalanceError: Generated lines do not balance
    """
    total = _positive_amount(total_amount, "Total amount")

    lines = [
        _gl_line(
            line_number=1,
            account_code=SERVICE_REVENUE,
            side=Side.DR,
            amount=total,
            description=f"Revenue reversed - {invoice_ref}",
            invoice_transaction_ref=invoice_ref,
            context=context,
        ),
        _gl_line(
            line_number=2,
            account_code=ACCOUNTS_RECEIVABLE,
            side=Side.CR,
            amount=total,
            description=f"Invoice cancelled - {invoice_ref}",
            entity_ref=customer_ref,
            invoice_transaction_ref=invoice_ref,
            context=context,
        ),
    ]

    assert_balanced(lines)
    logger.debug("Generated invoice cancellation lines", extra_fields={"total": total})
    return lines
