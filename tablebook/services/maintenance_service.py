"""Maintenance lifecycle helpers."""

from __future__ import annotations

import logging
from datetime import datetime

from tablebook.models.maintenance import TableMaintenance
from tablebook.services.errors import InvalidInterval, InvalidTransition

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "scheduled": {"in_progress", "cancelled"},
    "in_progress": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    """Return whether maintenance can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def transition_maintenance(
    record: TableMaintenance,
    new_status: str,
    as_of: datetime,
    *,
    actual_start: datetime | None = None,
    actual_end: datetime | None = None,
) -> None:
    """Move a maintenance record to ``new_status``.

    Starting stamps ``actual_start`` and completing stamps ``actual_end`` with
    ``as_of`` unless the caller supplies the instant.
    """
    if not can_transition(record.status, new_status):
        raise InvalidTransition(f"Invalid maintenance transition: {record.status} -> {new_status}")

    if new_status == "in_progress":
        record.actual_start = actual_start or as_of
    elif new_status == "completed":
        ended = actual_end or as_of
        started = record.actual_start or record.scheduled_start
        if ended <= started:
            raise InvalidInterval(f"maintenance {record.id} would end at {ended.isoformat()} before it started")
        record.actual_end = ended

    logger.info("[MAINTENANCE] id=%s %s -> %s", record.id, record.status, new_status)
    record.status = new_status
