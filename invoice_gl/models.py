"""
Invoice GL Models

Defines data structures for:
- GL accounts and their classification enums
- Invoice line items (input, coerced with pydantic)
- Generated GL transaction lines and their line data
- Balance summaries and posting context
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.functional_validators import BeforeValidator
from typing_extensions import Annotated


# =============================================================================
# Value Parsers
# =============================================================================

def parse_decimal(value):
    """Parse decimal from various formats (string with $ or commas, floats, etc.)."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse amount: {value!r}")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            return None
        s = s.replace("$", "").replace(",", "")
        if s.startswith("(") and s.endswith(")"):
            s = "-" + s[1:-1]
        try:
            return Decimal(s)
        except InvalidOperation:
            raise ValueError(f"Cannot parse amount: {value!r}") from None
    return value


def parse_date(value):
    """Parse a calendar date from date, datetime or common string formats.

    Raises:
        ValueError: If the value is empty or not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s == "":
            raise ValueError("Cannot parse date: empty string")
        for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y"):
            try:
                return datetime.strptime(s, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        raise ValueError(f"Cannot parse date: {s}")
    raise ValueError(f"Cannot parse date: {value!r}")


DecimalValue = Annotated[Decimal, BeforeValidator(parse_decimal)]


# =============================================================================
# Enums
# =============================================================================

class AccountType(str, Enum):
    """GL account classification"""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class Side(str, Enum):
    """Side of a double-entry line"""
    DR = "DR"
    CR = "CR"


class PaymentMethod(str, Enum):
    """Payment-method tokens accepted by the payment router"""
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    CHEQUE = "CHEQUE"


class InvoiceOperation(str, Enum):
    """Invoice operations that carry a smart code"""
    CREATION = "CREATION"
    PAYMENT = "PAYMENT"
    CANCELLATION = "CANCELLATION"


# =============================================================================
# GL Account
# =============================================================================

@dataclass(frozen=True)
class GLAccount:
    """
    Chart-of-accounts entry.

    Attributes:
        code: Account code (unique key, e.g. "120000")
        name: Account name
        account_type: asset, liability, equity, revenue or expense
        normal_balance: Side that increases the account
        descriptive_tag: Smart code describing the account
        description: Human-readable description
    """
    code: str
    name: str
    account_type: AccountType
    normal_balance: Side
    descriptive_tag: str
    description: str = ""


# =============================================================================
# Invoice Line Items (input)
# =============================================================================

class InvoiceLineItem(BaseModel):
    """A billable line on a customer invoice.

    Accepts snake_case or camelCase keys. Business rules (quantity > 0,
    line amount = quantity x unit amount) are checked by the validator,
    not here, so every violation keeps its own error kind.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    description: str = ""
    quantity: DecimalValue
    unit_amount: DecimalValue = Field(alias="unitAmount")
    line_amount: DecimalValue = Field(alias="lineAmount")
    service_ref: Optional[str] = Field(default=None, alias="serviceRef")
    tax_amount: Optional[DecimalValue] = Field(default=None, alias="taxAmount")
    discount_amount: Optional[DecimalValue] = Field(default=None, alias="discountAmount")


def coerce_line_item(item: Any) -> InvoiceLineItem:
    """Return `item` as an InvoiceLineItem, validating dicts."""
    if isinstance(item, InvoiceLineItem):
        return item
    return InvoiceLineItem.model_validate(item)


# =============================================================================
# Generated GL Lines (output)
# =============================================================================

@dataclass(frozen=True)
class PostingContext:
    """Optional stamping applied to every generated line.

    When `posting_date` is set, lines record its year and month as the
    fiscal year and period.
    """
    currency: Optional[str] = None
    posting_date: Optional[date] = None

    @property
    def fiscal_year(self) -> Optional[int]:
        return self.posting_date.year if self.posting_date else None

    @property
    def fiscal_period(self) -> Optional[int]:
        return self.posting_date.month if self.posting_date else None


@dataclass(frozen=True)
class GLLineData:
    """GL metadata carried by a transaction line."""
    gl_account_code: str
    gl_account_name: str
    side: Side
    account_type: AccountType
    amount: Decimal
    descriptive_tag: str
    payment_method: Optional[str] = None
    invoice_transaction_ref: Optional[str] = None
    currency: Optional[str] = None
    fiscal_year: Optional[int] = None
    fiscal_period: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "gl_account_code": self.gl_account_code,
            "gl_account_name": self.gl_account_name,
            "side": self.side.value,
            "account_type": self.account_type.value,
            "amount": str(self.amount),
            "descriptive_tag": self.descriptive_tag,
        }
        optional = {
            "payment_method": self.payment_method,
            "invoice_transaction_ref": self.invoice_transaction_ref,
            "currency": self.currency,
            "fiscal_year": self.fiscal_year,
            "fiscal_period": self.fiscal_period,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class GLTransactionLine:
    """
    One GL line of a universal transaction.

    Attributes:
        line_number: 1-based position in the transaction
        description: Line narrative
        line_data: Account, side and amount
        entity_ref: Customer entity the line is linked to
        line_type: Always "GL"
        quantity: Always 1 for GL lines
    """
    line_number: int
    description: str
    line_data: GLLineData
    entity_ref: Optional[str] = None
    line_type: str = "GL"
    quantity: Decimal = Decimal("1")

    @property
    def amount(self) -> Decimal:
        return self.line_data.amount

    @property
    def unit_amount(self) -> Decimal:
        return self.line_data.amount

    @property
    def line_amount(self) -> Decimal:
        return self.line_data.amount

    @property
    def side(self) -> Side:
        return self.line_data.side

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the line record accepted by the posting service"""
        return {
            "line_number": self.line_number,
            "line_type": self.line_type,
            "entity_id": self.entity_ref,
            "description": self.description,
            "quantity": str(self.quantity),
            "unit_amount": str(self.unit_amount),
            "line_amount": str(self.line_amount),
            "line_data": self.line_data.to_dict(),
        }


@dataclass(frozen=True)
class BalanceSummary:
    """Debit/credit totals of a set of GL lines"""
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool

    @property
    def difference(self) -> Decimal:
        return abs(self.total_debit - self.total_credit)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "difference": str(self.difference),
            "is_balanced": self.is_balanced,
        }


@dataclass
class PostingResult:
    """Outcome of posting one invoice operation"""
    transaction_id: str
    operation: InvoiceOperation
    smart_code: str
    lines: List[GLTransactionLine] = field(default_factory=list)
    balance: Optional[BalanceSummary] = None
