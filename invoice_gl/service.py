"""
Invoice Posting Service

Records invoice business events and lets the accounting follow:
1. Validate the invoice input
2. Generate balanced GL lines
3. Build the transaction payload with its smart code
4. Hand it to the transaction-posting service

Nothing is posted when validation or generation fails.
"""

from datetime import date
from typing import Any, Dict, Optional, Sequence

from gl_core.config import get_settings
from gl_core.observability.logging import get_logger, with_correlation

from .errors import InvoiceGLError
from .generator import (
    generate_invoice_cancellation_lines,
    generate_invoice_creation_lines,
    generate_invoice_payment_lines,
)
from .models import (
    GLTransactionLine,
    InvoiceOperation,
    PostingContext,
    PostingResult,
    parse_date,
)
from .posting import TransactionPoster, build_transaction_payload
from .smart_codes import build_invoice_smart_code, qualify_smart_code
from .validation import require_customer, summarize_balance, validate_invoice_data

logger = get_logger(__name__)


class InvoicePostingService:
    """
    Posts invoice creation, payment and cancellation for one organization.

    Usage:
        service = InvoicePostingService(poster, organization_id="ORG-001")
        result = service.create_invoice("CUST-1", line_items, 750, due_date="2025-02-01")
        service.record_payment(result.transaction_id, "CUST-1", 750, "CARD")
    """

    def __init__(
        self,
        poster: TransactionPoster,
        organization_id: str,
        currency: Optional[str] = None,
        module: Optional[str] = None,
    ):
        """
        Initialize the service.

        Args:
            poster: Transaction-posting service
            organization_id: Tenant all transactions are posted to
            currency: Currency stamped on lines (defaults to HERA_DEFAULT_CURRENCY)
            module: Optional smart-code module segment (e.g. "SALON")
        """
        self.poster = poster
        self.organization_id = organization_id
        self.currency = currency or get_settings().default_currency
        self.module = module

    def _smart_code(self, operation: InvoiceOperation) -> str:
        code = build_invoice_smart_code(operation)
        if self.module:
            code = qualify_smart_code(code, self.module)
        return code

    def _post(
        self,
        operation: InvoiceOperation,
        lines: Sequence[GLTransactionLine],
        total_amount: Any,
        transaction_date: date,
        customer_ref: str,
        reference: Optional[str],
        metadata: Dict[str, Any],
    ) -> PostingResult:
        smart_code = self._smart_code(operation)
        payload = build_transaction_payload(
            organization_id=self.organization_id,
            operation=operation,
            smart_code=smart_code,
            lines=lines,
            total_amount=total_amount,
            transaction_date=transaction_date,
            customer_ref=customer_ref,
            reference=reference,
            metadata=metadata,
        )

        transaction_id = self.poster.post_transaction(payload)
        balance = summarize_balance(lines)

        with with_correlation(transaction_id=transaction_id):
            logger.info(
                f"Posted {operation.value.lower()} transaction",
                extra_fields={
                    "smart_code": smart_code,
                    "total_debit": balance.total_debit,
                    "total_credit": balance.total_credit,
                },
            )

        return PostingResult(
            transaction_id=transaction_id,
            operation=operation,
            smart_code=smart_code,
            lines=list(lines),
            balance=balance,
        )

    def _run(self, operation: InvoiceOperation, action):
        """Run an operation, logging failures before re-raising them."""
        try:
            return action()
        except InvoiceGLError as e:
            logger.warning(
                f"{operation.value} rejected: {e.message}",
                extra_fields={"error_kind": e.kind.value, **e.details},
            )
            raise
        except Exception as e:
            logger.exception(f"{operation.value} posting failed: {e}")
            raise

    # =========================================================================
    # Operations
    # =========================================================================

    def create_invoice(
        self,
        customer_ref: str,
        line_items: Sequence[Any],
        total_amount: Any,
        due_date: Any,
        invoice_date: Any = None,
        reference: Optional[str] = None,
    ) -> PostingResult:
        """
        Validate, generate and post a new invoice.

        Args:
            customer_ref: Customer entity being billed
            line_items: InvoiceLineItem objects or dicts
            total_amount: Invoice total
            due_date: Payment due date
            invoice_date: Business date (defaults to today)
            reference: Invoice number

        Returns:
            PostingResult with the transaction id and generated lines
        """
        operation = InvoiceOperation.CREATION

        def action() -> PostingResult:
            validate_invoice_data(customer_ref, total_amount, due_date, line_items)
            posting_date = parse_date(invoice_date) if invoice_date is not None else date.today()
            lines = generate_invoice_creation_lines(
                line_items,
                total_amount,
                customer_ref,
                context=PostingContext(currency=self.currency, posting_date=posting_date),
            )
            return self._post(
                operation,
                lines,
                total_amount,
                posting_date,
                customer_ref,
                reference,
                {"due_date": parse_date(due_date).isoformat(), "line_item_count": len(line_items)},
            )

        with with_correlation(
            organization_id=self.organization_id,
            customer_ref=customer_ref,
            invoice_ref=reference,
            operation=operation.value,
        ):
            return self._run(operation, action)

    def record_payment(
        self,
        invoice_ref: str,
        customer_ref: str,
        payment_amount: Any,
        payment_method: str,
        payment_date: Any = None,
        reference: Optional[str] = None,
    ) -> PostingResult:
        """
        Post a full, single-method payment against an invoice.

        Args:
            invoice_ref: Transaction id of the invoice being paid
            customer_ref: Customer entity paying
            payment_amount: Amount received
            payment_method: CASH, BANK_TRANSFER, CARD or CHEQUE
            payment_date: Business date (defaults to today)
            reference: Receipt number
        """
        operation = InvoiceOperation.PAYMENT

        def action() -> PostingResult:
            require_customer(customer_ref)
            posting_date = parse_date(payment_date) if payment_date is not None else date.today()
            lines = generate_invoice_payment_lines(
                payment_amount,
                payment_method,
                customer_ref,
                invoice_ref,
                context=PostingContext(currency=self.currency, posting_date=posting_date),
            )
            return self._post(
                operation,
                lines,
                payment_amount,
                posting_date,
                customer_ref,
                reference,
                {"invoice_transaction_ref": invoice_ref, "payment_method": lines[0].line_data.payment_method},
            )

        with with_correlation(
            organization_id=self.organization_id,
            customer_ref=customer_ref,
            invoice_ref=invoice_ref,
            operation=operation.value,
        ):
            return self._run(operation, action)

    def cancel_invoice(
        self,
        invoice_ref: str,
        customer_ref: str,
        total_amount: Any,
        cancellation_date: Any = None,
        reason: Optional[str] = None,
    ) -> PostingResult:
        """
        Post the reversal of an invoice.

        Args:
            invoice_ref: Transaction id of the invoice being cancelled
            customer_ref: Customer entity on the invoice
            total_amount: Invoice total being reversed
            cancellation_date: Business date (defaults to today)
            reason: Free-text cancellation reason
        """
        operation = InvoiceOperation.CANCELLATION

        def action() -> PostingResult:
            require_customer(customer_ref)
            posting_date = parse_date(cancellation_date) if cancellation_date is not None else date.today()
            lines = generate_invoice_cancellation_lines(
                total_amount,
                customer_ref,
                invoice_ref,
                context=PostingContext(currency=self.currency, posting_date=posting_date),
            )
            metadata = {"invoice_transaction_ref": invoice_ref}
            if reason:
                metadata["reason"] = reason
            return self._post(
                operation,
                lines,
                total_amount,
                posting_date,
                customer_ref,
                None,
                metadata,
            )

        with with_correlation(
            organization_id=self.organization_id,
            customer_ref=customer_ref,
            invoice_ref=invoice_ref,
            operation=operation.value,
        ):
            return self._run(operation, action)
