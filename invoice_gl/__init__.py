"""
Invoice GL Package

Stateless engine that maps customer invoices to double-entry GL lines.

Features:
- Static chart of accounts for the invoice flows
- Payment-method routing to cash, bank and card accounts
- Invoice input validation (fail-fast or collect-all)
- Balanced GL lines for invoice creation, payment and cancellation
- Receivable aging buckets and aging summaries
- Invoice smart codes
- Posting hand-off to an external transaction-posting service

Usage:
    from invoice_gl import generate_invoice_creation_lines, calculate_aging_bucket

    lines = generate_invoice_creation_lines(
        [{"description": "Haircut", "quantity": 1, "unit_amount": 450, "line_amount": 450}],
        total_amount=450,
        customer_ref="CUST-001",
    )
    bucket = calculate_aging_bucket("2025-01-31")
"""

from .models import (
    # Enums
    AccountType,
    Side,
    PaymentMethod,
    InvoiceOperation,

    # Data classes
    GLAccount,
    InvoiceLineItem,
    GLLineData,
    GLTransactionLine,
    BalanceSummary,
    PostingContext,
    PostingResult,
)

from .errors import (
    ErrorKind,
    InvoiceGLError,
    InputShapeError,
    ArithmeticMismatchError,
    MissingCustomerError,
    MissingOrganizationError,
    NonPositiveTotalError,
    InvalidDateError,
    EmptyLineItemsError,
    InvalidQuantityError,
    NegativeUnitAmountError,
    LineAmountMismatchError,
    TotalMismatchError,
    AmountMismatchError,
    LedgerImbalanceError,
    InvalidPaymentMethodError,
    UnknownAccountError,
    InvoiceValidationErrors,
)

from .accounts import (
    GL_ACCOUNTS,
    get_gl_account,
    list_gl_accounts,
)

from .payments import (
    PAYMENT_METHOD_ACCOUNTS,
    resolve_payment_account,
)

from .validation import (
    AMOUNT_TOLERANCE,
    amounts_match,
    validate_invoice_data,
    collect_invoice_errors,
    require_customer,
    summarize_balance,
    assert_balanced,
)

from .generator import (
    generate_invoice_creation_lines,
    generate_invoice_payment_lines,
    generate_invoice_cancellation_lines,
)

from .aging import (
    AgingBucket,
    AgingSummary,
    calculate_aging_bucket,
    days_past_due,
    summarize_aging,
)

from .smart_codes import (
    build_invoice_smart_code,
    qualify_smart_code,
    is_valid_smart_code,
)

from .posting import (
    TransactionPoster,
    build_transaction_payload,
)

from .service import InvoicePostingService

__all__ = [
    # Enums
    "AccountType",
    "Side",
    "PaymentMethod",
    "InvoiceOperation",
    "AgingBucket",

    # Data classes
    "GLAccount",
    "InvoiceLineItem",
    "GLLineData",
    "GLTransactionLine",
    "BalanceSummary",
    "PostingContext",
    "PostingResult",
    "AgingSummary",

    # Errors
    "ErrorKind",
    "InvoiceGLError",
    "InputShapeError",
    "ArithmeticMismatchError",
    "MissingCustomerError",
    "MissingOrganizationError",
    "NonPositiveTotalError",
    "InvalidDateError",
    "EmptyLineItemsError",
    "InvalidQuantityError",
    "NegativeUnitAmountError",
    "LineAmountMismatchError",
    "TotalMismatchError",
    "AmountMismatchError",
    "LedgerImbalanceError",
    "InvalidPaymentMethodError",
    "UnknownAccountError",
    "InvoiceValidationErrors",

    # Registry / routing
    "GL_ACCOUNTS",
    "get_gl_account",
    "list_gl_accounts",
    "PAYMENT_METHOD_ACCOUNTS",
    "resolve_payment_account",

    # Validation
    "AMOUNT_TOLERANCE",
    "amounts_match",
    "validate_invoice_data",
    "collect_invoice_errors",
    "require_customer",
    "summarize_balance",
    "assert_balanced",

    # Generation
    "generate_invoice_creation_lines",
    "generate_invoice_payment_lines",
    "generate_invoice_cancellation_lines",

    # Aging
    "calculate_aging_bucket",
    "days_past_due",
    "summarize_aging",

    # Smart codes
    "build_invoice_smart_code",
    "qualify_smart_code",
    "is_valid_smart_code",

    # Posting
    "TransactionPoster",
    "build_transaction_payload",
    "InvoicePostingService",
]
