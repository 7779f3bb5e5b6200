"""Operating shifts and the fixed-step slot grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.models.restaurant import OperatingHour
from tablebook.services.errors import ClosedDay, DataUnavailable, InvalidInterval
from tablebook.services.intervals import BoundedInterval

logger = logging.getLogger(__name__)

SLOT_STEP: timedelta = timedelta(minutes=30)


@dataclass(frozen=True)
class Shift:
    """One contiguous operating window, e.g. lunch or dinner."""

    open_time: time
    close_time: time

    def bounds(self, target_date: date) -> BoundedInterval:
        """Return the shift as datetimes; a close at or before open falls on the next day."""
        opens = datetime.combine(target_date, self.open_time)
        closes = datetime.combine(target_date, self.close_time)
        if closes <= opens:
            closes += timedelta(days=1)
        return BoundedInterval(opens, closes)

    def as_dict(self) -> dict[str, str]:
        return {"open": self.open_time.strftime("%H:%M"), "close": self.close_time.strftime("%H:%M")}


def day_of_week(target_date: date) -> int:
    """Return weekday index with 0=Sunday..6=Saturday."""
    return (target_date.weekday() + 1) % 7


def resolve_shifts(db: Session, restaurant_id: int, target_date: date) -> list[Shift]:
    """Return the restaurant's shifts for the weekday of ``target_date`` in opening order.

    Rows flagged ``is_closed`` are skipped; raises ``ClosedDay`` when no open row remains.
    """
    weekday = day_of_week(target_date)
    try:
        rows = db.scalars(
            select(OperatingHour).where(
                OperatingHour.restaurant_id == restaurant_id,
                OperatingHour.day_of_week == weekday,
            )
        ).all()
    except SQLAlchemyError as exc:
        logger.exception("[AVAILABILITY] Failed to load operating hours for restaurant_id=%s", restaurant_id)
        raise DataUnavailable("operating hours") from exc

    open_rows = [row for row in rows if not row.is_closed]
    if not open_rows:
        raise ClosedDay(f"Restaurant is closed on {target_date.isoformat()}")
    return sorted((Shift(row.open_time, row.close_time) for row in open_rows), key=lambda shift: shift.open_time)


def generate_slot_starts(target_date: date, shifts: list[Shift], duration_minutes: int) -> list[datetime]:
    """Return slot start times for every shift, stepping by ``SLOT_STEP``.

    A slot is emitted only when it ends by the shift close; shifts are walked
    independently and their slots concatenated chronologically.
    """
    if duration_minutes <= 0:
        raise InvalidInterval(f"reservation duration must be positive, got {duration_minutes}")
    length = timedelta(minutes=duration_minutes)

    starts: list[datetime] = []
    seen: set[datetime] = set()
    for shift in sorted(shifts, key=lambda item: item.open_time):
        bounds = shift.bounds(target_date)
        current = bounds.start
        while current + length <= bounds.end:
            if current not in seen:
                seen.add(current)
                starts.append(current)
            current += SLOT_STEP
    return sorted(starts)
