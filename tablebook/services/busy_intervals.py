"""Normalize reservations and maintenance records into per-table busy intervals."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.models.maintenance import TableMaintenance
from tablebook.models.reservation import Reservation
from tablebook.services.errors import DataUnavailable, InvalidInterval
from tablebook.services.intervals import BoundedInterval, Interval, OpenEndedInterval, overlaps

logger = logging.getLogger(__name__)

# Pending reservations are soft holds: hidden from display queries, enforced on writes.
DISPLAY_BLOCKING_STATUSES: frozenset[str] = frozenset({"confirmed", "seated"})
WRITE_BLOCKING_STATUSES: frozenset[str] = frozenset({"pending", "confirmed", "seated"})

SOURCE_RESERVATION: str = "reservation"
SOURCE_MAINTENANCE: str = "maintenance"


@dataclass(frozen=True)
class BusyInterval:
    """Span during which a table cannot take another booking."""

    table_id: int
    span: Interval
    source: str
    record_id: int
    status: str

    @property
    def start(self) -> datetime:
        return self.span.start

    @property
    def end(self) -> datetime | None:
        if isinstance(self.span, OpenEndedInterval):
            return None
        return self.span.end


def reservation_span(reservation: Reservation, default_duration: int) -> BoundedInterval:
    """Return the occupied span of a reservation.

    Rows without an explicit end are assumed to last ``default_duration`` minutes.
    """
    start: datetime | None = reservation.start_time
    if start is None:
        if reservation.reservation_time is None:
            raise InvalidInterval(f"reservation {reservation.id} has no start time")
        start = datetime.combine(reservation.reservation_date, reservation.reservation_time)
    end: datetime = reservation.end_time or start + timedelta(minutes=default_duration)
    return BoundedInterval(start, end)


def maintenance_span(record: TableMaintenance) -> Interval | None:
    """Return the blocking span of a maintenance record, or None when it no longer blocks."""
    if record.status == "in_progress":
        start: datetime = record.actual_start or record.scheduled_start
        if record.actual_end is None:
            return OpenEndedInterval(start)
        return BoundedInterval(start, record.actual_end)
    if record.status == "scheduled":
        return BoundedInterval(record.scheduled_start, record.scheduled_end)
    return None


def _fetch_reservations(
    db: Session,
    table_ids: Collection[int],
    window: BoundedInterval,
    statuses: Collection[str],
    exclude_reservation_id: int | None,
) -> list[Reservation]:
    # Rows with only a date + time are matched by day and refined after span derivation.
    first_day = window.start.date() - timedelta(days=1)
    last_day = window.end.date()
    stmt = select(Reservation).where(
        Reservation.table_id.in_(list(table_ids)),
        Reservation.status.in_(list(statuses)),
        or_(
            and_(
                Reservation.start_time.is_not(None),
                Reservation.start_time < window.end,
                or_(Reservation.end_time.is_(None), Reservation.end_time > window.start),
            ),
            and_(
                Reservation.start_time.is_(None),
                Reservation.reservation_date >= first_day,
                Reservation.reservation_date <= last_day,
            ),
        ),
    )
    if exclude_reservation_id is not None:
        stmt = stmt.where(Reservation.id != exclude_reservation_id)
    return list(db.scalars(stmt).all())


def _fetch_maintenance(
    db: Session,
    table_ids: Collection[int],
    window: BoundedInterval,
    exclude_maintenance_id: int | None,
) -> list[TableMaintenance]:
    stmt = select(TableMaintenance).where(
        TableMaintenance.table_id.in_(list(table_ids)),
        or_(
            TableMaintenance.status == "in_progress",
            and_(
                TableMaintenance.status == "scheduled",
                TableMaintenance.scheduled_start < window.end,
                TableMaintenance.scheduled_end > window.start,
            ),
        ),
    )
    if exclude_maintenance_id is not None:
        stmt = stmt.where(TableMaintenance.id != exclude_maintenance_id)
    return list(db.scalars(stmt).all())


def load_busy_intervals(
    db: Session,
    table_ids: Collection[int],
    window: BoundedInterval,
    *,
    statuses: Collection[str],
    default_duration: int,
    exclude_reservation_id: int | None = None,
    exclude_maintenance_id: int | None = None,
) -> dict[int, list[BusyInterval]]:
    """Return busy intervals per table for everything that can block inside ``window``.

    Reservations count only when their status is in ``statuses`` and their span
    touches the window. Scheduled maintenance counts when it intersects the
    window; in-progress maintenance always counts.

    Raises ``DataUnavailable`` when either source cannot be read.
    """
    busy: dict[int, list[BusyInterval]] = {table_id: [] for table_id in table_ids}
    if not busy:
        return busy

    try:
        reservations = _fetch_reservations(db, busy.keys(), window, statuses, exclude_reservation_id)
    except SQLAlchemyError as exc:
        logger.exception("[AVAILABILITY] Failed to load reservations for tables=%s", sorted(busy))
        raise DataUnavailable(SOURCE_RESERVATION) from exc

    try:
        maintenance_records = _fetch_maintenance(db, busy.keys(), window, exclude_maintenance_id)
    except SQLAlchemyError as exc:
        logger.exception("[AVAILABILITY] Failed to load maintenance for tables=%s", sorted(busy))
        raise DataUnavailable(SOURCE_MAINTENANCE) from exc

    for reservation in reservations:
        span = reservation_span(reservation, default_duration)
        if not overlaps(span, window):
            continue
        busy[reservation.table_id].append(
            BusyInterval(
                table_id=reservation.table_id,
                span=span,
                source=SOURCE_RESERVATION,
                record_id=reservation.id,
                status=reservation.status,
            )
        )

    for record in maintenance_records:
        maintenance_window = maintenance_span(record)
        if maintenance_window is None:
            continue
        busy[record.table_id].append(
            BusyInterval(
                table_id=record.table_id,
                span=maintenance_window,
                source=SOURCE_MAINTENANCE,
                record_id=record.id,
                status=record.status,
            )
        )

    for intervals in busy.values():
        intervals.sort(key=lambda item: item.start)
    return busy

