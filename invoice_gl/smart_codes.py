"""
Smart-Code Formatter

Smart codes are dot-segmented tags naming the business meaning of a
transaction or account: uppercase segments followed by a lowercase version
suffix, e.g. HERA.TRANSACTION.INVOICE.CREATION.v1.

Invoice codes built here have five segments. The wider system expects at
least six; callers add the module segment with qualify_smart_code().
"""

import re
from typing import Optional, Union

from gl_core.config import get_settings

from .models import InvoiceOperation


SEGMENT_PATTERN = re.compile(r"^[A-Z0-9_]+$")
VERSION_PATTERN = re.compile(r"^v[0-9]+$")

MIN_SMART_CODE_SEGMENTS = 6


def build_invoice_smart_code(
    operation: Union[InvoiceOperation, str],
    version: Optional[int] = None,
) -> str:
    """
    Build the smart code for an invoice operation.

    Args:
        operation: CREATION, PAYMENT or CANCELLATION
        version: Version number (defaults to HERA_SMART_CODE_VERSION)

    Returns:
        e.g. "HERA.TRANSACTION.INVOICE.CREATION.v1"

    Raises:
        ValueError: For an unknown operation or a version below 1
    """
    op = InvoiceOperation(operation)
    settings = get_settings()
    if version is None:
        version = settings.smart_code_version
    if version < 1:
        raise ValueError(f"Smart code version must be >= 1, got {version}")

    return f"{settings.smart_code_domain}.TRANSACTION.INVOICE.{op.value}.v{version}"


def qualify_smart_code(smart_code: str, module: str) -> str:
    """
    Insert a module segment after the domain.

    qualify_smart_code("HERA.TRANSACTION.INVOICE.CREATION.v1", "salon")
    -> "HERA.SALON.TRANSACTION.INVOICE.CREATION.v1"
    """
    module = module.strip().upper()
    if not SEGMENT_PATTERN.match(module):
        raise ValueError(f"Invalid smart code segment: {module!r}")

    domain, _, rest = smart_code.partition(".")
    if not rest:
        raise ValueError(f"Invalid smart code: {smart_code!r}")
    return f"{domain}.{module}.{rest}"


def is_valid_smart_code(smart_code: str, min_segments: int = MIN_SMART_CODE_SEGMENTS) -> bool:
    """Uppercase segments, lowercase v<N> suffix, at least `min_segments` segments."""
    if not isinstance(smart_code, str):
        return False

    segments = smart_code.split(".")
    if len(segments) < min_segments:
        return False
    if not VERSION_PATTERN.match(segments[-1]):
        return False
    return all(SEGMENT_PATTERN.match(s) for s in segments[:-1])
