"""Availability evaluation: slotted day search, point-in-time search and live table status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from tablebook.core.config import settings
from tablebook.services.busy_intervals import (
    DISPLAY_BLOCKING_STATUSES,
    SOURCE_MAINTENANCE,
    SOURCE_RESERVATION,
    WRITE_BLOCKING_STATUSES,
    BusyInterval,
    load_busy_intervals,
)
from tablebook.services.eligibility import (
    TableSnapshot,
    filter_eligible_tables,
    load_table_catalog,
    validate_party_size,
)
from tablebook.services.errors import ClosedDay, DataUnavailable
from tablebook.services.intervals import BoundedInterval, interval_from, overlaps
from tablebook.services.settings_service import get_default_duration
from tablebook.services.slots import Shift, generate_slot_starts, resolve_shifts

logger = logging.getLogger(__name__)

NOW_EPSILON: timedelta = timedelta(seconds=1)
UNKNOWN_AVAILABILITY_MESSAGE: str = "Availability could not be determined"


@dataclass(frozen=True)
class TimeSlot:
    """Candidate reservation window with the tables free for all of it."""

    time: str
    start: datetime
    end: datetime
    available: bool
    tables: tuple[TableSnapshot, ...] = ()


@dataclass
class AreaAvailability:
    """Free tables of one area."""

    area_id: int
    area_name: str
    tables: list[TableSnapshot] = field(default_factory=list)

    @property
    def available_count(self) -> int:
        return len(self.tables)

    @property
    def total_capacity(self) -> int:
        return sum(table.capacity for table in self.tables)


@dataclass
class AvailabilityResult:
    """Outcome of a slotted availability query for one day."""

    restaurant_id: int
    target_date: date
    party_size: int
    duration_minutes: int
    available: bool | None
    closed: bool = False
    message: str | None = None
    time_slots: list[TimeSlot] = field(default_factory=list)
    operating_hours: list[Shift] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    degraded: bool = False


@dataclass
class PointAvailability:
    """Tables free for one explicit window, grouped by area."""

    window: BoundedInterval
    party_size: int
    tables: list[TableSnapshot]
    areas: list[AreaAvailability]
    stats: dict[str, int]
    degraded: bool = False


@dataclass
class TableStatusView:
    """Live status of a table at a given instant."""

    table: TableSnapshot
    current_status: str
    current_reservation: BusyInterval | None = None
    upcoming_maintenance: BusyInterval | None = None


def is_table_free(table_id: int, span: BoundedInterval, busy: dict[int, list[BusyInterval]]) -> bool:
    """Return True when no busy interval of the table overlaps ``span``."""
    return not any(overlaps(span, interval.span) for interval in busy.get(table_id, []))


def free_tables(
    tables: list[TableSnapshot],
    span: BoundedInterval,
    busy: dict[int, list[BusyInterval]],
) -> list[TableSnapshot]:
    return [table for table in tables if is_table_free(table.id, span, busy)]


def evaluate_slots(
    starts: list[datetime],
    duration_minutes: int,
    tables: list[TableSnapshot],
    busy: dict[int, list[BusyInterval]],
) -> list[TimeSlot]:
    """Cross-reference every slot with every eligible table."""
    slots: list[TimeSlot] = []
    for start in starts:
        span = interval_from(start, duration_minutes)
        available_tables = free_tables(tables, span, busy)
        slots.append(
            TimeSlot(
                time=start.strftime("%H:%M"),
                start=span.start,
                end=span.end,
                available=bool(available_tables),
                tables=tuple(available_tables),
            )
        )
    return slots


def summarize_by_area(tables: list[TableSnapshot]) -> list[AreaAvailability]:
    """Group tables by area, ordered by area name."""
    by_area: dict[int, AreaAvailability] = {}
    for table in tables:
        entry = by_area.setdefault(table.area_id, AreaAvailability(area_id=table.area_id, area_name=table.area_name))
        entry.tables.append(table)
    return sorted(by_area.values(), key=lambda item: (item.area_name, item.area_id))


def _default_duration(db: Session, restaurant_id: int) -> int:
    try:
        return get_default_duration(db, restaurant_id)
    except DataUnavailable:
        if not settings.availability_degrade_on_error:
            raise
        logger.warning("[AVAILABILITY] Settings unavailable for restaurant_id=%s; using configured duration", restaurant_id)
        return settings.default_reservation_duration


def _slot_stats(eligible: list[TableSnapshot], slots: list[TimeSlot]) -> dict[str, int]:
    return {
        "eligible_tables": len(eligible),
        "total_slots": len(slots),
        "available_slots": sum(1 for slot in slots if slot.available),
    }


def check_availability(
    db: Session,
    *,
    restaurant_id: int,
    target_date: date,
    party_size: int,
    duration_minutes: int | None = None,
    area_id: int | None = None,
) -> AvailabilityResult:
    """Return bookable time slots for a party on one day.

    Pending reservations do not hide slots here; they are enforced when the
    booking is written. When a constraint source cannot be read and
    ``settings.availability_degrade_on_error`` is set, the result is flagged
    ``degraded`` with ``available=None`` instead of raising.
    """
    size = validate_party_size(party_size)
    default_duration = _default_duration(db, restaurant_id)
    duration = duration_minutes if duration_minutes is not None else default_duration

    result = AvailabilityResult(
        restaurant_id=restaurant_id,
        target_date=target_date,
        party_size=size,
        duration_minutes=duration,
        available=False,
    )

    try:
        shifts = resolve_shifts(db, restaurant_id, target_date)
    except ClosedDay as exc:
        result.closed = True
        result.message = str(exc)
        result.stats = _slot_stats([], [])
        return result
    except DataUnavailable:
        if not settings.availability_degrade_on_error:
            raise
        logger.warning("[AVAILABILITY] Operating hours unavailable for restaurant_id=%s; degrading", restaurant_id)
        result.available = None
        result.degraded = True
        result.message = UNKNOWN_AVAILABILITY_MESSAGE
        result.stats = _slot_stats([], [])
        return result

    result.operating_hours = shifts
    starts = generate_slot_starts(target_date, shifts, duration)
    shift_bounds = [shift.bounds(target_date) for shift in shifts]
    window = BoundedInterval(min(b.start for b in shift_bounds), max(b.end for b in shift_bounds))

    try:
        catalog = load_table_catalog(db, restaurant_id, area_id)
        eligible = filter_eligible_tables(catalog, size, area_id=area_id)
        busy = load_busy_intervals(
            db,
            [table.id for table in eligible],
            window,
            statuses=DISPLAY_BLOCKING_STATUSES,
            default_duration=default_duration,
        )
    except DataUnavailable as exc:
        if not settings.availability_degrade_on_error:
            raise
        logger.warning(
            "[AVAILABILITY] %s unavailable for restaurant_id=%s date=%s; degrading",
            exc.source,
            restaurant_id,
            target_date.isoformat(),
        )
        result.available = None
        result.degraded = True
        result.message = UNKNOWN_AVAILABILITY_MESSAGE
        result.time_slots = [
            TimeSlot(time=start.strftime("%H:%M"), start=start, end=start + timedelta(minutes=duration), available=False)
            for start in starts
        ]
        result.stats = _slot_stats([], result.time_slots)
        return result

    result.time_slots = evaluate_slots(starts, duration, eligible, busy)
    result.available = any(slot.available for slot in result.time_slots)
    result.stats = _slot_stats(eligible, result.time_slots)
    if not eligible:
        result.message = "No tables available for this party size"
    elif not result.available:
        result.message = "Fully booked for the requested day"
    logger.info(
        "[AVAILABILITY] restaurant_id=%s date=%s party=%s slots=%s available_slots=%s",
        restaurant_id,
        target_date.isoformat(),
        size,
        result.stats["total_slots"],
        result.stats["available_slots"],
    )
    return result


def find_available_tables(
    db: Session,
    *,
    restaurant_id: int,
    start: datetime,
    party_size: int,
    duration_minutes: int | None = None,
    area_id: int | None = None,
    zone: str | None = None,
) -> PointAvailability:
    """Return tables free for ``[start, start + duration)`` with a per-area breakdown."""
    size = validate_party_size(party_size)
    default_duration = _default_duration(db, restaurant_id)
    window = interval_from(start, duration_minutes if duration_minutes is not None else default_duration)

    eligible: list[TableSnapshot] = []
    try:
        catalog = load_table_catalog(db, restaurant_id, area_id)
        eligible = filter_eligible_tables(catalog, size, area_id=area_id, zone=zone)
        busy = load_busy_intervals(
            db,
            [table.id for table in eligible],
            window,
            statuses=DISPLAY_BLOCKING_STATUSES,
            default_duration=default_duration,
        )
    except DataUnavailable:
        if not settings.availability_degrade_on_error:
            raise
        logger.warning("[AVAILABILITY] Table data unavailable for restaurant_id=%s; degrading", restaurant_id)
        return PointAvailability(
            window=window,
            party_size=size,
            tables=[],
            areas=[],
            stats={"total_available": 0, "total_tables": len(eligible), "total_capacity": 0, "areas_available": 0},
            degraded=True,
        )

    available = free_tables(eligible, window, busy)
    areas = summarize_by_area(available)
    return PointAvailability(
        window=window,
        party_size=size,
        tables=available,
        areas=areas,
        stats={
            "total_available": len(available),
            "total_tables": len(eligible),
            "total_capacity": sum(table.capacity for table in available),
            "areas_available": len(areas),
        },
    )


def _current_status(intervals: list[BusyInterval], now_slot: BoundedInterval) -> tuple[str, BusyInterval | None]:
    active = [interval for interval in intervals if overlaps(now_slot, interval.span)]
    if any(interval.source == SOURCE_MAINTENANCE for interval in active):
        return "maintenance", None
    reservation = next((interval for interval in active if interval.source == SOURCE_RESERVATION), None)
    if reservation is None:
        return "available", None
    return ("occupied" if reservation.status == "seated" else "reserved"), reservation


def get_table_status(
    db: Session,
    *,
    restaurant_id: int,
    as_of: datetime,
    area_id: int | None = None,
    status: str | None = None,
) -> list[TableStatusView]:
    """Return every active table with its status at ``as_of``.

    Priority is maintenance, then an overlapping reservation (seated means
    occupied, pending/confirmed means reserved), then available.
    """
    catalog = load_table_catalog(db, restaurant_id, area_id)
    day_start = datetime.combine(as_of.date(), datetime.min.time())
    window = BoundedInterval(day_start, as_of + timedelta(days=1))
    busy = load_busy_intervals(
        db,
        [table.id for table in catalog],
        window,
        statuses=WRITE_BLOCKING_STATUSES,
        default_duration=get_default_duration(db, restaurant_id),
    )
    now_slot = BoundedInterval(as_of, as_of + NOW_EPSILON)

    views: list[TableStatusView] = []
    for table in sorted(catalog, key=lambda item: (item.number, item.id)):
        intervals = busy.get(table.id, [])
        current_status, reservation = _current_status(intervals, now_slot)
        upcoming = next(
            (
                interval
                for interval in intervals
                if interval.source == SOURCE_MAINTENANCE and interval.status == "scheduled" and interval.start > as_of
            ),
            None,
        )
        if status is not None and current_status != status:
            continue
        views.append(
            TableStatusView(
                table=table,
                current_status=current_status,
                current_reservation=reservation,
                upcoming_maintenance=upcoming,
            )
        )
    return views
