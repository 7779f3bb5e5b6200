"""Availability endpoints: day slots, point-in-time table search and auto-assignment."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tablebook.core.security import ensure_restaurant_access, get_current_user
from tablebook.db.session import get_db
from tablebook.models.user import User
from tablebook.schemas.availability import (
    AreaAvailabilityResponse,
    AssignedTableResponse,
    AssignmentRequest,
    AssignmentResponse,
    AvailabilityRequest,
    AvailabilityResponse,
    ShiftResponse,
    TableResponse,
    TableSearchResponse,
    TimeSlotResponse,
    TimeSuggestionResponse,
)
from tablebook.services.assignment_service import AssignmentPreferences, assign_table
from tablebook.services.availability_service import check_availability, find_available_tables
from tablebook.services.errors import DataUnavailable, InvalidInterval, InvalidPartySize
from tablebook.utils.time import to_local_naive

router: APIRouter = APIRouter()


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidPartySize):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, InvalidInterval):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


def _serialize_tables(tables) -> list[TableResponse]:
    return [TableResponse.model_validate(table) for table in tables]


@router.post("/slots", response_model=AvailabilityResponse)
def availability_slots(
    payload: AvailabilityRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AvailabilityResponse:
    ensure_restaurant_access(current_user, payload.restaurant_id)
    try:
        result = check_availability(
            db,
            restaurant_id=payload.restaurant_id,
            target_date=payload.date,
            party_size=payload.party_size,
            duration_minutes=payload.duration_minutes,
            area_id=payload.area_id,
        )
    except (InvalidPartySize, InvalidInterval, DataUnavailable) as exc:
        raise _http_error(exc) from exc

    return AvailabilityResponse(
        restaurant_id=result.restaurant_id,
        date=result.target_date,
        party_size=result.party_size,
        duration_minutes=result.duration_minutes,
        available=result.available,
        closed=result.closed,
        degraded=result.degraded,
        message=result.message,
        time_slots=[
            TimeSlotResponse(
                time=slot.time,
                start=slot.start,
                end=slot.end,
                available=slot.available,
                tables=_serialize_tables(slot.tables),
            )
            for slot in result.time_slots
        ],
        operating_hours=[ShiftResponse(**shift.as_dict()) for shift in result.operating_hours],
        stats=result.stats,
    )


@router.get("/tables", response_model=TableSearchResponse)
def available_tables(
    restaurant_id: int,
    start: datetime,
    party_size: int = Query(ge=1),
    duration_minutes: int | None = Query(default=None, ge=1),
    area_id: int | None = None,
    zone: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> TableSearchResponse:
    ensure_restaurant_access(current_user, restaurant_id)
    try:
        result = find_available_tables(
            db,
            restaurant_id=restaurant_id,
            start=to_local_naive(start),
            party_size=party_size,
            duration_minutes=duration_minutes,
            area_id=area_id,
            zone=zone,
        )
    except (InvalidPartySize, InvalidInterval, DataUnavailable) as exc:
        raise _http_error(exc) from exc

    return TableSearchResponse(
        start=result.window.start,
        end=result.window.end,
        party_size=result.party_size,
        degraded=result.degraded,
        tables=_serialize_tables(result.tables),
        areas=[AreaAvailabilityResponse.model_validate(area) for area in result.areas],
        stats=result.stats,
    )


@router.post("/assign", response_model=AssignmentResponse)
def assign(
    payload: AssignmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AssignmentResponse:
    ensure_restaurant_access(current_user, payload.restaurant_id)
    try:
        result = assign_table(
            db,
            restaurant_id=payload.restaurant_id,
            start=to_local_naive(payload.start),
            party_size=payload.party_size,
            duration_minutes=payload.duration_minutes,
            area_id=payload.area_id,
            preferences=AssignmentPreferences(
                area_id=payload.preferred_area_id,
                shape=payload.shape,
                zone=payload.zone,
                accessible=payload.accessible,
            ),
        )
    except (InvalidPartySize, InvalidInterval, DataUnavailable) as exc:
        raise _http_error(exc) from exc

    best = None
    if result.best is not None:
        best = AssignedTableResponse(
            table=TableResponse.model_validate(result.best.table),
            score=round(result.best.score, 2),
            reasons=result.best.reasons,
        )
    return AssignmentResponse(
        assigned=result.assigned,
        start=result.window.start,
        end=result.window.end,
        best=best,
        alternatives=_serialize_tables(result.alternatives),
        suggestions=[TimeSuggestionResponse(**item) for item in result.suggestions],
        reason=result.reason,
    )
