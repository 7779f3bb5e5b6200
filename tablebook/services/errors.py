"""Domain errors raised by the availability engine and the booking writer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tablebook.services.busy_intervals import BusyInterval


class AvailabilityError(Exception):
    """Base class for availability and booking errors."""


class InvalidPartySize(AvailabilityError):
    """Raised when a party size is not a positive integer or does not fit a table."""


class InvalidInterval(AvailabilityError):
    """Raised when an interval would end at or before its start."""


class DataUnavailable(AvailabilityError):
    """Raised when a constraint source could not be read."""

    def __init__(self, source: str) -> None:
        super().__init__(f"{source} data is unavailable")
        self.source = source


class ClosedDay(AvailabilityError):
    """Raised when the restaurant has no operating window on the requested day."""


class TableNotFound(AvailabilityError):
    """Raised when a booking targets an unknown or inactive table."""


class InvalidTransition(AvailabilityError):
    """Raised when a status change is not allowed from the current status."""


class ConflictError(AvailabilityError):
    """Raised when a candidate booking overlaps existing blocking records."""

    def __init__(self, conflicts: list[BusyInterval]) -> None:
        super().__init__(f"{len(conflicts)} conflicting record(s)")
        self.conflicts = conflicts
