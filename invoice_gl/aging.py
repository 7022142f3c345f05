"""
Aging Calculator

Buckets an outstanding invoice by whole days past its due date:

    days <= 0  -> CURRENT
    1 - 30     -> 1-30 DAYS
    31 - 60    -> 31-60 DAYS
    61 - 90    -> 61-90 DAYS
    > 90       -> 90+ DAYS

Fractional days are floored, so a boundary day stays in the lower bucket.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .errors import InvalidDateError
from .models import parse_date, parse_decimal


class AgingBucket(str, Enum):
    """Receivable aging buckets, in ascending order of age"""
    CURRENT = "CURRENT"
    DAYS_1_30 = "1-30 DAYS"
    DAYS_31_60 = "31-60 DAYS"
    DAYS_61_90 = "61-90 DAYS"
    DAYS_90_PLUS = "90+ DAYS"

    @property
    def rank(self) -> int:
        return list(AgingBucket).index(self)


# Upper bound (inclusive) of days past due for each bounded bucket
_BUCKET_LIMITS = (
    (0, AgingBucket.CURRENT),
    (30, AgingBucket.DAYS_1_30),
    (60, AgingBucket.DAYS_31_60),
    (90, AgingBucket.DAYS_61_90),
)


def _to_datetime(value: Any, label: str) -> datetime:
    """Accept date, datetime or date strings; dates become midnight."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            pass
    try:
        return datetime.combine(parse_date(value), time.min)
    except ValueError:
        raise InvalidDateError(
            f"{label} is not a valid date: {value!r}",
            {label.lower().replace(" ", "_"): value},
        ) from None


def days_past_due(due_date: Any, as_of: Any = None) -> int:
    """
    Whole days elapsed since the due date (negative when not yet due).

    Args:
        due_date: Due date (date, datetime or string)
        as_of: Reference point, defaults to now

    Raises:
        InvalidDateError: If either date cannot be parsed
    """
    due = _to_datetime(due_date, "Due date")
    if as_of is None:
        reference = datetime.now(due.tzinfo) if due.tzinfo else datetime.now()
    else:
        reference = _to_datetime(as_of, "As of date")

    # Mixed naive/aware values are compared as if in the same zone
    if (due.tzinfo is None) != (reference.tzinfo is None):
        due = due.replace(tzinfo=None)
        reference = reference.replace(tzinfo=None)

    elapsed = reference - due
    return math.floor(elapsed.total_seconds() / 86400)


def bucket_for_days(days: int) -> AgingBucket:
    """Map a days-past-due count to its bucket."""
    for limit, bucket in _BUCKET_LIMITS:
        if days <= limit:
            return bucket
    return AgingBucket.DAYS_90_PLUS


def calculate_aging_bucket(due_date: Any, as_of: Any = None) -> AgingBucket:
    """
    Bucket an invoice by days past due.

    Args:
        due_date: Due date (date, datetime or string)
        as_of: Reference point, defaults to now

    Returns:
        AgingBucket (a str enum, e.g. "1-30 DAYS")
    """
    return bucket_for_days(days_past_due(due_date, as_of))


# =============================================================================
# Aging Summary
# =============================================================================

@dataclass
class AgingSummary:
    """Receivables totals per aging bucket"""
    as_of: Optional[datetime] = None
    totals: Dict[AgingBucket, Decimal] = field(
        default_factory=lambda: {b: Decimal("0") for b in AgingBucket}
    )
    counts: Dict[AgingBucket, int] = field(
        default_factory=lambda: {b: 0 for b in AgingBucket}
    )

    @property
    def total_outstanding(self) -> Decimal:
        return sum(self.totals.values(), Decimal("0"))

    @property
    def overdue(self) -> Decimal:
        return self.total_outstanding - self.totals[AgingBucket.CURRENT]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "buckets": [
                {
                    "bucket": bucket.value,
                    "count": self.counts[bucket],
                    "amount": str(self.totals[bucket]),
                }
                for bucket in AgingBucket
            ],
            "total_outstanding": str(self.total_outstanding),
            "overdue": str(self.overdue),
        }


def summarize_aging(
    items: Iterable[Tuple[Any, Any]],
    as_of: Any = None,
) -> AgingSummary:
    """
    Build an AR aging summary.

    Args:
        items: (due_date, outstanding_amount) pairs
        as_of: Reference point, defaults to now

    Returns:
        AgingSummary with per-bucket amounts and counts
    """
    reference = _to_datetime(as_of, "As of date") if as_of is not None else datetime.now()
    summary = AgingSummary(as_of=reference)

    for due_date, amount in items:
        bucket = calculate_aging_bucket(due_date, reference)
        summary.totals[bucket] += parse_decimal(amount) or Decimal("0")
        summary.counts[bucket] += 1

    return summary
