"""
Invoice GL Errors

Every failure raised by the engine is an InvoiceGLError tagged with an
ErrorKind, so callers can branch on `err.kind` (or catch a family) instead of
matching message text. Numeric context travels in `err.details` as strings.

Families:
- InputShapeError: malformed invoice input, corrected by the caller
- ArithmeticMismatchError: amounts that do not reconcile, fatal for the operation
- InvalidPaymentMethodError / UnknownAccountError: unresolvable references
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """One member per failure condition."""
    MISSING_CUSTOMER = "MISSING_CUSTOMER"
    MISSING_ORGANIZATION = "MISSING_ORGANIZATION"
    NON_POSITIVE_TOTAL = "NON_POSITIVE_TOTAL"
    INVALID_DATE = "INVALID_DATE"
    EMPTY_LINE_ITEMS = "EMPTY_LINE_ITEMS"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    NEGATIVE_UNIT_AMOUNT = "NEGATIVE_UNIT_AMOUNT"
    LINE_AMOUNT_MISMATCH = "LINE_AMOUNT_MISMATCH"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    LEDGER_IMBALANCE = "LEDGER_IMBALANCE"
    INVALID_PAYMENT_METHOD = "INVALID_PAYMENT_METHOD"
    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"
    MULTIPLE = "MULTIPLE"


class InvoiceGLError(Exception):
    """Base exception for invoice GL mapping errors."""
    kind: ErrorKind

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {k: _stringify(v) for k, v in (details or {}).items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


def _stringify(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, bool, list, dict)):
        return value
    return str(value)


# =============================================================================
# Input shape errors
# =============================================================================

class InputShapeError(InvoiceGLError):
    """Invoice input is malformed."""
    pass


class MissingCustomerError(InputShapeError):
    kind = ErrorKind.MISSING_CUSTOMER


class MissingOrganizationError(InputShapeError):
    kind = ErrorKind.MISSING_ORGANIZATION


class NonPositiveTotalError(InputShapeError):
    kind = ErrorKind.NON_POSITIVE_TOTAL


class InvalidDateError(InputShapeError):
    kind = ErrorKind.INVALID_DATE


class EmptyLineItemsError(InputShapeError):
    kind = ErrorKind.EMPTY_LINE_ITEMS


class InvalidQuantityError(InputShapeError):
    kind = ErrorKind.INVALID_QUANTITY


class NegativeUnitAmountError(InputShapeError):
    kind = ErrorKind.NEGATIVE_UNIT_AMOUNT


# =============================================================================
# Arithmetic mismatch errors
# =============================================================================

class ArithmeticMismatchError(InvoiceGLError):
    """Amounts do not reconcile; nothing may be posted."""
    pass


class LineAmountMismatchError(ArithmeticMismatchError):
    kind = ErrorKind.LINE_AMOUNT_MISMATCH


class TotalMismatchError(ArithmeticMismatchError):
    kind = ErrorKind.TOTAL_MISMATCH


class AmountMismatchError(ArithmeticMismatchError):
    kind = ErrorKind.AMOUNT_MISMATCH


class LedgerImbalanceError(ArithmeticMismatchError):
    kind = ErrorKind.LEDGER_IMBALANCE


# =============================================================================
# Reference errors
# =============================================================================

class InvalidPaymentMethodError(InvoiceGLError):
    kind = ErrorKind.INVALID_PAYMENT_METHOD


class UnknownAccountError(InvoiceGLError):
    kind = ErrorKind.UNKNOWN_ACCOUNT


class InvoiceValidationErrors(InvoiceGLError):
    """Every violation found by a collecting validation pass."""
    kind = ErrorKind.MULTIPLE

    def __init__(self, errors: List[InvoiceGLError]):
        self.errors = list(errors)
        summary = "; ".join(e.message for e in self.errors)
        super().__init__(
            f"Validation failed with {len(self.errors)} error(s): {summary}",
            {"kinds": [e.kind.value for e in self.errors]},
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data
