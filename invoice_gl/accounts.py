"""
GL Account Registry

Static chart of accounts used by the invoice flows. The registry is a
read-only mapping built once at import time.
"""

from types import MappingProxyType
from typing import List, Mapping

from .errors import UnknownAccountError
from .models import AccountType, GLAccount, Side


CASH_ON_HAND = "110000"
BANK_ACCOUNT = "110100"
CARD_CLEARING = "110200"
ACCOUNTS_RECEIVABLE = "120000"
SERVICE_REVENUE = "400000"


_ACCOUNTS = [
    GLAccount(
        code=CASH_ON_HAND,
        name="Cash on Hand",
        account_type=AccountType.ASSET,
        normal_balance=Side.DR,
        descriptive_tag="HERA.FINANCE.GL.ACCOUNT.ASSET.CASH.v1",
        description="Physical cash held at the business premises",
    ),
    GLAccount(
        code=BANK_ACCOUNT,
        name="Bank Account",
        account_type=AccountType.ASSET,
        normal_balance=Side.DR,
        descriptive_tag="HERA.FINANCE.GL.ACCOUNT.ASSET.BANK.v1",
        description="Operating bank account for transfers and cheque deposits",
    ),
    GLAccount(
        code=CARD_CLEARING,
        name="Card Payment Clearing",
        account_type=AccountType.ASSET,
        normal_balance=Side.DR,
        descriptive_tag="HERA.FINANCE.GL.ACCOUNT.ASSET.CARD_CLEARING.v1",
        description="Card receipts awaiting settlement by the processor",
    ),
    GLAccount(
        code=ACCOUNTS_RECEIVABLE,
        name="Accounts Receivable",
        account_type=AccountType.ASSET,
        normal_balance=Side.DR,
        descriptive_tag="HERA.FINANCE.GL.ACCOUNT.ASSET.AR.v1",
        description="Amounts invoiced to customers and not yet collected",
    ),
    GLAccount(
        code=SERVICE_REVENUE,
        name="Service Revenue",
        account_type=AccountType.REVENUE,
        normal_balance=Side.CR,
        descriptive_tag="HERA.FINANCE.GL.ACCOUNT.REVENUE.SERVICE.v1",
        description="Revenue earned from services invoiced to customers",
    ),
]

GL_ACCOUNTS: Mapping[str, GLAccount] = MappingProxyType(
    {account.code: account for account in _ACCOUNTS}
)


def get_gl_account(code: str) -> GLAccount:
    """
    Look up an account by code.

    Raises:
        UnknownAccountError: If the code is not in the registry
    """
    try:
        return GL_ACCOUNTS[code]
    except (KeyError, TypeError):
        raise UnknownAccountError(
            f"Unknown GL account code: {code!r}",
            {"code": code, "known_codes": sorted(GL_ACCOUNTS)},
        ) from None


def list_gl_accounts() -> List[GLAccount]:
    """All registered accounts ordered by code"""
    return [GL_ACCOUNTS[code] for code in sorted(GL_ACCOUNTS)]
