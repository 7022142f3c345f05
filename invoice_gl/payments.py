"""
Payment-Method Router

Maps a payment-method token to the cash, bank or card account that receives
the money. Tokens are case-sensitive; there is no fallback account.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .accounts import BANK_ACCOUNT, CARD_CLEARING, CASH_ON_HAND
from .errors import InvalidPaymentMethodError
from .models import PaymentMethod


PAYMENT_METHOD_ACCOUNTS: Mapping[str, str] = MappingProxyType({
    PaymentMethod.CASH.value: CASH_ON_HAND,
    PaymentMethod.BANK_TRANSFER.value: BANK_ACCOUNT,
    PaymentMethod.CARD.value: CARD_CLEARING,
    # Cheques are deposited into the bank account
    PaymentMethod.CHEQUE.value: BANK_ACCOUNT,
})


def resolve_payment_account(payment_method: Optional[str]) -> str:
    """
    Resolve a payment-method token to a GL account code.

    Args:
        payment_method: CASH, BANK_TRANSFER, CARD or CHEQUE

    Returns:
        GL account code receiving the payment

    Raises:
        InvalidPaymentMethodError: For any other token
    """
    if isinstance(payment_method, PaymentMethod):
        payment_method = payment_method.value

    account_code = PAYMENT_METHOD_ACCOUNTS.get(payment_method) if isinstance(payment_method, str) else None
    if account_code is None:
        raise InvalidPaymentMethodError(
            f"Invalid Payment Method: {payment_method!r}",
            {
                "payment_method": payment_method,
                "supported": list(PAYMENT_METHOD_ACCOUNTS),
            },
        )
    return account_code
