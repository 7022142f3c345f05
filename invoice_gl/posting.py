"""Transaction posting hand-off.

The engine never writes to a ledger. It hands a balanced transaction (header
plus GL lines) to a TransactionPoster, the external transaction-posting
service, which persists it atomically per organization.

Key Design Principles:
- Payloads are plain dicts in the posting service's snake_case shape
- Balance is re-checked here, immediately before hand-off
- Concrete posters (RPC clients, test fakes) live outside this package
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from .errors import MissingOrganizationError
from .models import GLTransactionLine, InvoiceOperation, parse_decimal
from .validation import assert_balanced


TRANSACTION_TYPES: Dict[InvoiceOperation, str] = {
    InvoiceOperation.CREATION: "INVOICE",
    InvoiceOperation.PAYMENT: "INVOICE_PAYMENT",
    InvoiceOperation.CANCELLATION: "INVOICE_CANCELLATION",
}


class TransactionPoster(ABC):
    """Abstract transaction-posting service.

    Implementations must persist the header and all lines as one atomic
    transaction scoped to `payload["organization_id"]`.
    """

    @abstractmethod
    def post_transaction(self, payload: Dict[str, Any]) -> str:
        """Persist a transaction.

        Args:
            payload: Output of build_transaction_payload()

        Returns:
            Transaction id assigned by the posting service
        """
        pass


def _iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def build_transaction_payload(
    organization_id: str,
    operation: InvoiceOperation,
    smart_code: str,
    lines: Sequence[GLTransactionLine],
    total_amount: Any,
    transaction_date: Any,
    customer_ref: Optional[str] = None,
    reference: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build the header + lines record accepted by the posting service.

    Args:
        organization_id: Tenant the transaction belongs to
        operation: Invoice operation being recorded
        smart_code: Transaction smart code
        lines: Generated GL lines
        total_amount: Transaction total
        transaction_date: Business date of the transaction
        customer_ref: Customer entity (source entity of the transaction)
        reference: Caller's reference number (invoice number, receipt number)
        metadata: Additional header metadata

    Returns:
        Payload dict

    Raises:
        MissingOrganizationError: organization_id is empty
        LedgerImbalanceError: lines do not balance
    """
    if not organization_id or not str(organization_id).strip():
        raise MissingOrganizationError(
            "Organization id is required to post a transaction",
            {"organization_id": organization_id},
        )

    operation = InvoiceOperation(operation)
    balance = assert_balanced(lines)
    total = parse_decimal(total_amount) or Decimal("0")

    line_records: List[Dict[str, Any]] = [line.to_dict() for line in lines]

    return {
        "organization_id": organization_id,
        "transaction_type": TRANSACTION_TYPES[operation],
        "transaction_code": reference,
        "smart_code": smart_code,
        "transaction_date": _iso(transaction_date),
        "source_entity_id": customer_ref,
        "total_amount": str(total),
        "transaction_status": "posted",
        "metadata": {
            **(metadata or {}),
            "operation": operation.value,
            "total_debit": str(balance.total_debit),
            "total_credit": str(balance.total_credit),
        },
        "lines": line_records,
    }
