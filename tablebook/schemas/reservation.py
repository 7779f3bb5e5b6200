"""Reservation API schemas."""

from datetime import date, datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tablebook.schemas.availability import BusyIntervalResponse


class ConflictCheckRequest(BaseModel):
    """Candidate window to test against one table."""

    table_id: int
    start: datetime
    end: datetime
    exclude_reservation_id: int | None = None
    exclude_maintenance_id: int | None = None


class ConflictCheckResponse(BaseModel):
    conflict: bool
    conflicting_records: list[BusyIntervalResponse]


class ReservationCreate(BaseModel):
    """Create a booking on a specific table."""

    restaurant_id: int
    table_id: int
    start: datetime
    end: datetime | None = None
    duration_minutes: int | None = Field(default=None, ge=1)
    party_size: int = Field(ge=1)
    status: Literal["pending", "confirmed"] = "pending"
    guest_name: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class ReservationSchedule(BaseModel):
    """Move a booking to a new window and optionally another table."""

    start: datetime
    end: datetime
    table_id: int | None = None


class ReservationStatusUpdate(BaseModel):
    status: Literal["confirmed", "seated", "completed", "cancelled", "no_show"]


class ReservationResponse(BaseModel):
    """Serialized reservation."""

    id: int
    restaurant_id: int
    table_id: int | None
    reservation_date: date
    reservation_time: time | None
    start_time: datetime | None
    end_time: datetime | None
    party_size: int
    status: str
    guest_name: str | None = None
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
