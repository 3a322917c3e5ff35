"""
Timezone helpers.

Booking windows are stored as naive UTC. Aware datetimes are converted to UTC
and stripped of tzinfo; naive datetimes are taken to be UTC already.
"""

from datetime import datetime, timezone
from typing import Optional


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_naive_utc_optional(value: Optional[datetime]) -> Optional[datetime]:
    return to_naive_utc(value) if value is not None else None


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
