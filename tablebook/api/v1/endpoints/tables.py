"""Live table status endpoint."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tablebook.core.security import ensure_restaurant_access, get_current_user
from tablebook.db.session import get_db
from tablebook.models.user import User
from tablebook.schemas.availability import BusyIntervalResponse, TableResponse, TableStatusResponse
from tablebook.services.availability_service import get_table_status
from tablebook.services.errors import DataUnavailable, InvalidInterval
from tablebook.utils.time import local_now, to_local_naive

router: APIRouter = APIRouter()


@router.get("/status", response_model=list[TableStatusResponse])
def table_status(
    restaurant_id: int,
    area_id: int | None = None,
    status_filter: Literal["available", "occupied", "reserved", "maintenance"] | None = Query(default=None, alias="status"),
    as_of: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[TableStatusResponse]:
    ensure_restaurant_access(current_user, restaurant_id)
    instant = to_local_naive(as_of) if as_of is not None else local_now()
    try:
        views = get_table_status(
            db,
            restaurant_id=restaurant_id,
            as_of=instant,
            area_id=area_id,
            status=status_filter,
        )
    except DataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except InvalidInterval as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    return [
        TableStatusResponse(
            table=TableResponse.model_validate(view.table),
            current_status=view.current_status,
            current_reservation=(
                BusyIntervalResponse.from_interval(view.current_reservation) if view.current_reservation else None
            ),
            upcoming_maintenance=(
                BusyIntervalResponse.from_interval(view.upcoming_maintenance) if view.upcoming_maintenance else None
            ),
        )
        for view in views
    ]
