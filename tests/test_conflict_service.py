"""Write-time conflict predicate tests."""

from datetime import date, datetime, time
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tablebook.db.base import Base
from tablebook.models.floor import Area, Table
from tablebook.models.maintenance import TableMaintenance
from tablebook.models.reservation import Reservation
from tablebook.models.restaurant import Restaurant
from tablebook.services.conflict_service import ensure_no_conflict, would_conflict
from tablebook.services.errors import ConflictError
from tablebook.services.intervals import BoundedInterval

MONDAY = date(2026, 3, 2)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(MONDAY, time(hour, minute))


@pytest.fixture()
def floor(tmp_path: Path):
    engine = _build_test_engine(tmp_path / "conflicts.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    with testing_session_local() as session:
        restaurant = Restaurant(name="Bistro")
        session.add(restaurant)
        session.flush()
        area = Area(restaurant_id=restaurant.id, name="Main Hall")
        session.add(area)
        session.flush()
        table = Table(area_id=area.id, number="T1", capacity=4)
        session.add(table)
        session.commit()
        yield session, restaurant.id, table.id


def _add_reservation(session: Session, restaurant_id: int, table_id: int, status: str) -> Reservation:
    reservation = Reservation(
        restaurant_id=restaurant_id,
        table_id=table_id,
        reservation_date=MONDAY,
        reservation_time=time(10, 0),
        start_time=_at(10),
        end_time=_at(12),
        party_size=2,
        status=status,
    )
    session.add(reservation)
    session.commit()
    return reservation


def test_back_to_back_bookings_do_not_conflict(floor) -> None:
    session, restaurant_id, table_id = floor
    _add_reservation(session, restaurant_id, table_id, "confirmed")

    assert would_conflict(session, table_id, BoundedInterval(_at(11), _at(13))).conflict is True
    assert would_conflict(session, table_id, BoundedInterval(_at(12), _at(13))).conflict is False
    assert would_conflict(session, table_id, BoundedInterval(_at(9), _at(10))).conflict is False


def test_pending_blocks_at_write_time(floor) -> None:
    session, restaurant_id, table_id = floor
    reservation = _add_reservation(session, restaurant_id, table_id, "pending")

    check = would_conflict(session, table_id, BoundedInterval(_at(11), _at(13)))

    assert check.conflict is True
    assert [(item.source, item.record_id, item.status) for item in check.conflicts] == [
        ("reservation", reservation.id, "pending")
    ]


def test_cancelled_reservation_never_conflicts(floor) -> None:
    session, restaurant_id, table_id = floor
    _add_reservation(session, restaurant_id, table_id, "cancelled")

    assert would_conflict(session, table_id, BoundedInterval(_at(10), _at(12))).conflict is False


def test_in_progress_maintenance_without_end_blocks_all_later_times(floor) -> None:
    session, _restaurant_id, table_id = floor
    session.add(
        TableMaintenance(
            table_id=table_id,
            reason="Broken chair",
            scheduled_start=_at(9),
            scheduled_end=_at(10),
            actual_start=_at(9),
            status="in_progress",
        )
    )
    session.commit()

    assert would_conflict(session, table_id, BoundedInterval(_at(11), _at(12))).conflict is True
    assert would_conflict(session, table_id, BoundedInterval(_at(23), _at(23, 30))).conflict is True
    late = BoundedInterval(datetime(2026, 3, 9, 19, 0), datetime(2026, 3, 9, 21, 0))
    assert would_conflict(session, table_id, late).conflict is True
    assert would_conflict(session, table_id, BoundedInterval(_at(7), _at(9))).conflict is False


def test_completed_maintenance_stops_blocking(floor) -> None:
    session, _restaurant_id, table_id = floor
    session.add(
        TableMaintenance(
            table_id=table_id,
            reason="Polish",
            scheduled_start=_at(9),
            scheduled_end=_at(10),
            actual_start=_at(9),
            actual_end=_at(11),
            status="completed",
        )
    )
    session.commit()

    assert would_conflict(session, table_id, BoundedInterval(_at(9), _at(10))).conflict is False


def test_record_being_updated_is_excluded(floor) -> None:
    session, restaurant_id, table_id = floor
    reservation = _add_reservation(session, restaurant_id, table_id, "confirmed")
    candidate = BoundedInterval(_at(10, 30), _at(12, 30))

    assert would_conflict(session, table_id, candidate).conflict is True
    assert would_conflict(session, table_id, candidate, exclude_reservation_id=reservation.id).conflict is False


def test_ensure_no_conflict_carries_records(floor) -> None:
    session, restaurant_id, table_id = floor
    reservation = _add_reservation(session, restaurant_id, table_id, "seated")

    with pytest.raises(ConflictError) as exc_info:
        ensure_no_conflict(session, table_id, BoundedInterval(_at(11), _at(12)))

    assert [item.record_id for item in exc_info.value.conflicts] == [reservation.id]
