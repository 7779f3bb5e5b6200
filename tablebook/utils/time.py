"""Clock helpers for the HTTP layer.

Reservation and maintenance times are stored as naive restaurant-local
datetimes; services never read the clock themselves.
"""

from __future__ import annotations

from datetime import datetime


def local_now() -> datetime:
    """Return the current restaurant-local time without tzinfo, to the second."""
    return datetime.now().replace(microsecond=0)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
