"""Schema exports."""

from tablebook.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse, UserCreateRequest
from tablebook.schemas.availability import (
    AssignmentRequest,
    AssignmentResponse,
    AvailabilityRequest,
    AvailabilityResponse,
    BusyIntervalResponse,
    TableResponse,
    TableSearchResponse,
    TableStatusResponse,
)
from tablebook.schemas.maintenance import MaintenanceCreate, MaintenanceResponse, MaintenanceStatusUpdate
from tablebook.schemas.reservation import (
    ConflictCheckRequest,
    ConflictCheckResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationSchedule,
    ReservationStatusUpdate,
)

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserCreateRequest",
    "AssignmentRequest",
    "AssignmentResponse",
    "AvailabilityRequest",
    "AvailabilityResponse",
    "BusyIntervalResponse",
    "TableResponse",
    "TableSearchResponse",
    "TableStatusResponse",
    "MaintenanceCreate",
    "MaintenanceResponse",
    "MaintenanceStatusUpdate",
    "ConflictCheckRequest",
    "ConflictCheckResponse",
    "ReservationCreate",
    "ReservationResponse",
    "ReservationSchedule",
    "ReservationStatusUpdate",
]
