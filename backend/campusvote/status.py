from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from campusvote.errors import InvalidSchedule


class ElectionStatus(str, Enum):
    NOT_SET = "not_set"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ENDED = "ended"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so comparisons never mix naive and aware."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_status(
    now: datetime, start: Optional[datetime], end: Optional[datetime]
) -> ElectionStatus:
    """
    Derive the election phase from the wall clock and the stored window.

    The window is half-open: ``start`` itself is already active and ``end``
    itself is already ended.
    """
    if start is None or end is None:
        return ElectionStatus.NOT_SET
    now = ensure_utc(now)
    if now < ensure_utc(start):
        return ElectionStatus.UPCOMING
    if now < ensure_utc(end):
        return ElectionStatus.ACTIVE
    return ElectionStatus.ENDED


def validate_schedule(
    start: Optional[datetime], end: Optional[datetime]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Return the normalised ``(start, end)`` pair or raise ``InvalidSchedule``."""
    if start is None and end is None:
        return None, None
    if start is None or end is None:
        raise InvalidSchedule("Both a start and an end time are required.")
    start, end = ensure_utc(start), ensure_utc(end)
    if start >= end:
        raise InvalidSchedule("The election must start before it ends.")
    return start, end


__all__ = [
    "ElectionStatus",
    "utcnow",
    "ensure_utc",
    "compute_status",
    "validate_schedule",
]
