"""Table maintenance endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.core.security import ensure_restaurant_access, require_roles
from tablebook.db.session import get_db
from tablebook.models.floor import Table
from tablebook.models.maintenance import TableMaintenance
from tablebook.models.user import User
from tablebook.schemas.availability import BusyIntervalResponse
from tablebook.schemas.maintenance import MaintenanceCreate, MaintenanceResponse, MaintenanceStatusUpdate
from tablebook.services.errors import (
    AvailabilityError,
    ConflictError,
    InvalidInterval,
    InvalidTransition,
    TableNotFound,
)
from tablebook.services.maintenance_service import transition_maintenance
from tablebook.services.reservation_writer import ReservationWriter
from tablebook.utils.time import local_now, to_local_naive

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)

_require_floor_manager = require_roles("ADMIN", "MANAGER")


def _get_table_restaurant_id(db: Session, table_id: int) -> int:
    table: Table | None = db.get(Table, table_id)
    if table is None or not table.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return table.area.restaurant_id


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
def schedule_maintenance(
    payload: MaintenanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_floor_manager),
) -> MaintenanceResponse:
    ensure_restaurant_access(current_user, _get_table_restaurant_id(db, payload.table_id))
    try:
        record = ReservationWriter(db).schedule_maintenance(
            table_id=payload.table_id,
            start=to_local_naive(payload.start),
            end=to_local_naive(payload.end),
            reason=payload.reason,
            notes=payload.notes,
            created_by_id=current_user.id,
        )
    except ConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Table is booked or already in maintenance for the requested time",
                "conflicting_records": [
                    BusyIntervalResponse.from_interval(item).model_dump(mode="json") for item in exc.conflicts
                ],
            },
        ) from exc
    except TableNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InvalidInterval as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except AvailabilityError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return MaintenanceResponse.model_validate(record)


@router.patch("/{maintenance_id}/status", response_model=MaintenanceResponse)
def update_maintenance_status(
    maintenance_id: int,
    payload: MaintenanceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_require_floor_manager),
) -> MaintenanceResponse:
    record: TableMaintenance | None = db.get(TableMaintenance, maintenance_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance record not found")
    ensure_restaurant_access(current_user, _get_table_restaurant_id(db, record.table_id))

    try:
        transition_maintenance(
            record,
            payload.status,
            local_now(),
            actual_start=to_local_naive(payload.actual_start) if payload.actual_start else None,
            actual_end=to_local_naive(payload.actual_end) if payload.actual_end else None,
        )
        db.commit()
    except InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvalidInterval as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[MAINTENANCE] Failed to update maintenance_id=%s", maintenance_id)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="maintenance data is unavailable") from exc

    db.refresh(record)
    return MaintenanceResponse.model_validate(record)
