"""Half-open time intervals and the overlap predicate every conflict check uses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from tablebook.services.errors import InvalidInterval


@dataclass(frozen=True)
class BoundedInterval:
    """Span ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidInterval(f"interval end {self.end.isoformat()} is not after start {self.start.isoformat()}")


@dataclass(frozen=True)
class OpenEndedInterval:
    """Span ``[start, +inf)`` for work that has begun and not yet been resolved."""

    start: datetime


Interval = BoundedInterval | OpenEndedInterval


def overlaps(a: Interval, b: Interval) -> bool:
    """Return True when two half-open intervals share at least one instant.

    Touching endpoints (``a.end == b.start``) do not overlap. An open end never
    falls before any start.
    """
    a_starts_before_b_ends = isinstance(b, OpenEndedInterval) or a.start < b.end
    b_starts_before_a_ends = isinstance(a, OpenEndedInterval) or b.start < a.end
    return a_starts_before_b_ends and b_starts_before_a_ends


def duration(a: Interval) -> timedelta | None:
    """Return interval length, or None when the interval is unbounded."""
    if isinstance(a, OpenEndedInterval):
        return None
    return a.end - a.start


def interval_from(start: datetime, minutes: int) -> BoundedInterval:
    """Build ``[start, start + minutes)``."""
    return BoundedInterval(start, start + timedelta(minutes=minutes))
