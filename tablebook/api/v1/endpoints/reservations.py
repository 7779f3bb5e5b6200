"""Reservation endpoints: conflict checks, atomic booking writes and status changes."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.core.security import ensure_restaurant_access, get_current_user
from tablebook.db.session import get_db
from tablebook.models.floor import Table
from tablebook.models.reservation import Reservation
from tablebook.models.user import User
from tablebook.schemas.availability import BusyIntervalResponse
from tablebook.schemas.reservation import (
    ConflictCheckRequest,
    ConflictCheckResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationSchedule,
    ReservationStatusUpdate,
)
from tablebook.services.conflict_service import would_conflict
from tablebook.services.errors import (
    AvailabilityError,
    ConflictError,
    DataUnavailable,
    InvalidInterval,
    InvalidPartySize,
    InvalidTransition,
    TableNotFound,
)
from tablebook.services.intervals import BoundedInterval
from tablebook.services.reservation_status import set_status
from tablebook.services.reservation_writer import ReservationWriter
from tablebook.services.settings_service import get_default_duration
from tablebook.utils.time import local_now, to_local_naive

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(exc: AvailabilityError) -> HTTPException:
    if isinstance(exc, ConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Table is not available for the requested time",
                "conflicting_records": [
                    BusyIntervalResponse.from_interval(item).model_dump(mode="json") for item in exc.conflicts
                ],
            },
        )
    if isinstance(exc, TableNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (InvalidPartySize, InvalidTransition)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, InvalidInterval):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


def _get_table_or_404(db: Session, table_id: int) -> Table:
    table: Table | None = db.get(Table, table_id)
    if table is None or not table.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return table


def _get_reservation_or_404(db: Session, reservation_id: int, user: User) -> Reservation:
    reservation: Reservation | None = db.get(Reservation, reservation_id)
    if reservation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found")
    ensure_restaurant_access(user, reservation.restaurant_id)
    return reservation


@router.post("/conflicts", response_model=ConflictCheckResponse)
def check_conflict(
    payload: ConflictCheckRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ConflictCheckResponse:
    table = _get_table_or_404(db, payload.table_id)
    ensure_restaurant_access(current_user, table.area.restaurant_id)
    try:
        check = would_conflict(
            db,
            table.id,
            BoundedInterval(to_local_naive(payload.start), to_local_naive(payload.end)),
            exclude_reservation_id=payload.exclude_reservation_id,
            exclude_maintenance_id=payload.exclude_maintenance_id,
        )
    except (InvalidInterval, DataUnavailable) as exc:
        raise _http_error(exc) from exc

    return ConflictCheckResponse(
        conflict=check.conflict,
        conflicting_records=[BusyIntervalResponse.from_interval(item) for item in check.conflicts],
    )


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    payload: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationResponse:
    ensure_restaurant_access(current_user, payload.restaurant_id)
    start = to_local_naive(payload.start)
    try:
        if payload.end is not None:
            end = to_local_naive(payload.end)
        else:
            minutes = payload.duration_minutes or get_default_duration(db, payload.restaurant_id)
            end = start + timedelta(minutes=minutes)
        reservation = ReservationWriter(db).create_reservation(
            restaurant_id=payload.restaurant_id,
            table_id=payload.table_id,
            start=start,
            end=end,
            party_size=payload.party_size,
            status=payload.status,
            guest_name=payload.guest_name,
            notes=payload.notes,
            created_by_id=current_user.id,
        )
    except AvailabilityError as exc:
        raise _http_error(exc) from exc

    return ReservationResponse.model_validate(reservation)


@router.put("/{reservation_id}/schedule", response_model=ReservationResponse)
def reschedule_reservation(
    reservation_id: int,
    payload: ReservationSchedule,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationResponse:
    _get_reservation_or_404(db, reservation_id, current_user)
    try:
        reservation = ReservationWriter(db).reschedule_reservation(
            reservation_id,
            start=to_local_naive(payload.start),
            end=to_local_naive(payload.end),
            table_id=payload.table_id,
        )
    except AvailabilityError as exc:
        raise _http_error(exc) from exc

    return ReservationResponse.model_validate(reservation)


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
def update_reservation_status(
    reservation_id: int,
    payload: ReservationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReservationResponse:
    reservation = _get_reservation_or_404(db, reservation_id, current_user)
    previous = reservation.status
    try:
        set_status(reservation, payload.status, local_now())
        db.commit()
    except InvalidTransition as exc:
        raise _http_error(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[RESERVATION] Failed to update status for reservation_id=%s", reservation_id)
        raise _http_error(DataUnavailable("reservations")) from exc

    db.refresh(reservation)
    logger.info("[RESERVATION] id=%s %s -> %s by user_id=%s", reservation.id, previous, reservation.status, current_user.id)
    return ReservationResponse.model_validate(reservation)
