"""Write-time conflict check for reservations and maintenance windows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.core.config import settings
from tablebook.models.floor import Area, Table
from tablebook.services.busy_intervals import WRITE_BLOCKING_STATUSES, BusyInterval, load_busy_intervals
from tablebook.services.errors import ConflictError, DataUnavailable
from tablebook.services.intervals import BoundedInterval, overlaps
from tablebook.services.settings_service import get_default_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictCheck:
    """Decision plus the records that caused it."""

    conflict: bool
    conflicts: list[BusyInterval] = field(default_factory=list)


def _default_duration_for_table(db: Session, table_id: int) -> int:
    try:
        restaurant_id: int | None = db.scalar(
            select(Area.restaurant_id).join(Table, Table.area_id == Area.id).where(Table.id == table_id)
        )
        if restaurant_id is None:
            return settings.default_reservation_duration
        return get_default_duration(db, restaurant_id)
    except SQLAlchemyError as exc:
        logger.exception("[CONFLICT] Failed to resolve restaurant for table_id=%s", table_id)
        raise DataUnavailable("restaurant settings") from exc


def would_conflict(
    db: Session,
    table_id: int,
    candidate: BoundedInterval,
    *,
    exclude_reservation_id: int | None = None,
    exclude_maintenance_id: int | None = None,
) -> ConflictCheck:
    """Check ``candidate`` against every blocking record of the table.

    Pending, confirmed and seated reservations block, as does scheduled or
    in-progress maintenance. The record being updated can be excluded.
    Raises ``DataUnavailable`` rather than answering without data.
    """
    busy = load_busy_intervals(
        db,
        [table_id],
        candidate,
        statuses=WRITE_BLOCKING_STATUSES,
        default_duration=_default_duration_for_table(db, table_id),
        exclude_reservation_id=exclude_reservation_id,
        exclude_maintenance_id=exclude_maintenance_id,
    )
    conflicts = [interval for interval in busy[table_id] if overlaps(candidate, interval.span)]
    if conflicts:
        logger.info(
            "[CONFLICT] table_id=%s candidate=%s..%s conflicts=%s",
            table_id,
            candidate.start.isoformat(),
            candidate.end.isoformat(),
            [(item.source, item.record_id) for item in conflicts],
        )
    return ConflictCheck(conflict=bool(conflicts), conflicts=conflicts)


def ensure_no_conflict(
    db: Session,
    table_id: int,
    candidate: BoundedInterval,
    *,
    exclude_reservation_id: int | None = None,
    exclude_maintenance_id: int | None = None,
) -> None:
    """Raise ConflictError carrying the overlapping records when the check fails."""
    check = would_conflict(
        db,
        table_id,
        candidate,
        exclude_reservation_id=exclude_reservation_id,
        exclude_maintenance_id=exclude_maintenance_id,
    )
    if check.conflict:
        raise ConflictError(check.conflicts)
