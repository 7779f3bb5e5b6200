"""Table maintenance API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MaintenanceCreate(BaseModel):
    """Schedule a maintenance window for a table."""

    table_id: int
    start: datetime
    end: datetime
    reason: str = Field(min_length=1, max_length=255)
    notes: str | None = None


class MaintenanceStatusUpdate(BaseModel):
    status: Literal["in_progress", "completed", "cancelled"]
    actual_start: datetime | None = None
    actual_end: datetime | None = None


class MaintenanceResponse(BaseModel):
    """Serialized maintenance record."""

    id: int
    table_id: int
    reason: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: datetime | None = None
    actual_end: datetime | None = None
    status: str
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)
