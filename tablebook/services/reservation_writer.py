"""Atomic check-and-write for table bookings.

Every write takes a per-table process lock, locks the table row
(``SELECT ... FOR UPDATE`` where the database supports it), re-runs the
conflict check in the same transaction and only then inserts and commits.
Storage failures surface as ``DataUnavailable`` and nothing is written.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from tablebook.models.floor import Table
from tablebook.models.maintenance import TableMaintenance
from tablebook.models.reservation import Reservation
from tablebook.services.busy_intervals import WRITE_BLOCKING_STATUSES
from tablebook.services.conflict_service import ensure_no_conflict
from tablebook.services.eligibility import validate_party_size
from tablebook.services.errors import (
    AvailabilityError,
    DataUnavailable,
    InvalidPartySize,
    InvalidTransition,
    TableNotFound,
)
from tablebook.services.intervals import BoundedInterval

logger = logging.getLogger(__name__)

INITIAL_RESERVATION_STATUSES: frozenset[str] = frozenset({"pending", "confirmed"})

_table_locks: dict[int, threading.Lock] = {}
_table_locks_guard = threading.Lock()


@contextmanager
def table_write_lock(table_id: int) -> Iterator[None]:
    """Serialize writers for one table inside this process."""
    with _table_locks_guard:
        lock = _table_locks.setdefault(table_id, threading.Lock())
    with lock:
        yield


class ReservationWriter:
    """Create and move bookings so that no two blocking records overlap on a table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _lock_table(self, table_id: int) -> Table:
        table: Table | None = self.db.execute(
            select(Table).options(joinedload(Table.area)).where(Table.id == table_id).with_for_update(of=Table)
        ).scalar_one_or_none()
        if table is None or not table.is_active:
            raise TableNotFound(f"Table {table_id} not found")
        return table

    @contextmanager
    def _write_scope(self, table_id: int, source: str) -> Iterator[Table]:
        with table_write_lock(table_id):
            try:
                yield self._lock_table(table_id)
                self.db.commit()
            except AvailabilityError:
                self.db.rollback()
                raise
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("[WRITER] Storage failure while writing %s for table_id=%s", source, table_id)
                raise DataUnavailable(source) from exc

    @staticmethod
    def _ensure_party_fits(table: Table, party_size: int) -> int:
        size = validate_party_size(party_size)
        if not table.min_capacity <= size <= table.capacity:
            raise InvalidPartySize(
                f"Party of {size} does not fit table {table.number} ({table.min_capacity}-{table.capacity} guests)"
            )
        return size

    def create_reservation(
        self,
        *,
        restaurant_id: int,
        table_id: int,
        start: datetime,
        end: datetime,
        party_size: int,
        status: str = "pending",
        guest_name: str | None = None,
        notes: str | None = None,
        created_by_id: int | None = None,
    ) -> Reservation:
        """Insert a reservation unless it overlaps a blocking record; raises ConflictError otherwise."""
        if status not in INITIAL_RESERVATION_STATUSES:
            raise InvalidTransition(f"New reservations cannot start as {status}")
        candidate = BoundedInterval(start, end)

        with self._write_scope(table_id, "reservations") as table:
            if table.area.restaurant_id != restaurant_id:
                raise TableNotFound(f"Table {table_id} not found in restaurant {restaurant_id}")
            size = self._ensure_party_fits(table, party_size)
            ensure_no_conflict(self.db, table_id, candidate)
            reservation = Reservation(
                restaurant_id=restaurant_id,
                table_id=table_id,
                reservation_date=start.date(),
                reservation_time=start.time().replace(second=0, microsecond=0),
                start_time=candidate.start,
                end_time=candidate.end,
                party_size=size,
                status=status,
                guest_name=guest_name,
                notes=notes,
                created_by_id=created_by_id,
            )
            self.db.add(reservation)

        self.db.refresh(reservation)
        logger.info("[WRITER] reservation id=%s table_id=%s %s..%s", reservation.id, table_id, start, end)
        return reservation

    def reschedule_reservation(
        self,
        reservation_id: int,
        *,
        start: datetime,
        end: datetime,
        table_id: int | None = None,
    ) -> Reservation:
        """Move an active reservation, ignoring its own current span in the conflict check."""
        reservation: Reservation | None = self.db.get(Reservation, reservation_id)
        if reservation is None:
            raise LookupError(f"Reservation {reservation_id} not found")
        if reservation.status not in WRITE_BLOCKING_STATUSES:
            raise InvalidTransition(f"Cannot reschedule a {reservation.status} reservation")
        target_table_id = table_id if table_id is not None else reservation.table_id
        if target_table_id is None:
            raise TableNotFound(f"Reservation {reservation_id} has no table")
        candidate = BoundedInterval(start, end)

        with self._write_scope(target_table_id, "reservations") as table:
            if table.area.restaurant_id != reservation.restaurant_id:
                raise TableNotFound(f"Table {target_table_id} not found in restaurant {reservation.restaurant_id}")
            self._ensure_party_fits(table, reservation.party_size)
            ensure_no_conflict(self.db, target_table_id, candidate, exclude_reservation_id=reservation.id)
            reservation.table_id = target_table_id
            reservation.reservation_date = start.date()
            reservation.reservation_time = start.time().replace(second=0, microsecond=0)
            reservation.start_time = candidate.start
            reservation.end_time = candidate.end

        self.db.refresh(reservation)
        logger.info("[WRITER] reservation id=%s moved to table_id=%s %s..%s", reservation.id, target_table_id, start, end)
        return reservation

    def schedule_maintenance(
        self,
        *,
        table_id: int,
        start: datetime,
        end: datetime,
        reason: str,
        notes: str | None = None,
        created_by_id: int | None = None,
    ) -> TableMaintenance:
        """Insert a scheduled maintenance window unless the table is booked or already in maintenance."""
        candidate = BoundedInterval(start, end)

        with self._write_scope(table_id, "maintenance"):
            ensure_no_conflict(self.db, table_id, candidate)
            record = TableMaintenance(
                table_id=table_id,
                reason=reason,
                scheduled_start=candidate.start,
                scheduled_end=candidate.end,
                status="scheduled",
                notes=notes,
                created_by_id=created_by_id,
            )
            self.db.add(record)

        self.db.refresh(record)
        logger.info("[WRITER] maintenance id=%s table_id=%s %s..%s", record.id, table_id, start, end)
        return record
