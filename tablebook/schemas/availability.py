"""Availability API schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AvailabilityRequest(BaseModel):
    """Slotted availability query for one day."""

    restaurant_id: int
    date: date
    party_size: int = Field(ge=1)
    duration_minutes: int | None = Field(default=None, ge=1)
    area_id: int | None = None


class TableResponse(BaseModel):
    """Serialized table."""

    id: int
    number: str
    capacity: int
    min_capacity: int
    area_id: int
    area_name: str
    is_accessible: bool = False
    shape: str = "rectangle"

    model_config = ConfigDict(from_attributes=True)


class TimeSlotResponse(BaseModel):
    time: str
    start: datetime
    end: datetime
    available: bool
    tables: list[TableResponse]


class ShiftResponse(BaseModel):
    open: str
    close: str


class AvailabilityResponse(BaseModel):
    """Slots for the requested day; ``available`` is null when data was unavailable."""

    restaurant_id: int
    date: date
    party_size: int
    duration_minutes: int
    available: bool | None
    closed: bool
    degraded: bool
    message: str | None = None
    time_slots: list[TimeSlotResponse]
    operating_hours: list[ShiftResponse]
    stats: dict[str, int]


class AreaAvailabilityResponse(BaseModel):
    area_id: int
    area_name: str
    available_count: int
    total_capacity: int
    tables: list[TableResponse]

    model_config = ConfigDict(from_attributes=True)


class TableSearchResponse(BaseModel):
    """Tables free for one explicit window."""

    start: datetime
    end: datetime
    party_size: int
    degraded: bool
    tables: list[TableResponse]
    areas: list[AreaAvailabilityResponse]
    stats: dict[str, int]


class BusyIntervalResponse(BaseModel):
    """A blocking record; ``end`` is null for open-ended maintenance."""

    id: int
    source: Literal["reservation", "maintenance"]
    status: str
    start: datetime
    end: datetime | None = None

    @classmethod
    def from_interval(cls, interval) -> "BusyIntervalResponse":
        return cls(
            id=interval.record_id,
            source=interval.source,
            status=interval.status,
            start=interval.start,
            end=interval.end,
        )


class TableStatusResponse(BaseModel):
    table: TableResponse
    current_status: Literal["available", "occupied", "reserved", "maintenance"]
    current_reservation: BusyIntervalResponse | None = None
    upcoming_maintenance: BusyIntervalResponse | None = None


class AssignmentRequest(BaseModel):
    """Request for an automatic table pick."""

    restaurant_id: int
    start: datetime
    party_size: int = Field(ge=1)
    duration_minutes: int | None = Field(default=None, ge=1)
    area_id: int | None = None
    preferred_area_id: int | None = None
    shape: str | None = None
    zone: str | None = None
    accessible: bool = False


class AssignedTableResponse(BaseModel):
    table: TableResponse
    score: float
    reasons: dict[str, int]


class TimeSuggestionResponse(BaseModel):
    time: str
    available: bool
    tables_count: int


class AssignmentResponse(BaseModel):
    assigned: bool
    start: datetime
    end: datetime
    best: AssignedTableResponse | None = None
    alternatives: list[TableResponse] = []
    suggestions: list[TimeSuggestionResponse] = []
    reason: str | None = None
