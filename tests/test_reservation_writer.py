"""Atomic booking writer tests."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time
from pathlib import Path

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from tablebook.db.base import Base
from tablebook.models.floor import Area, Table
from tablebook.models.maintenance import TableMaintenance
from tablebook.models.reservation import Reservation
from tablebook.models.restaurant import Restaurant
from tablebook.services import busy_intervals
from tablebook.services.errors import (
    ConflictError,
    DataUnavailable,
    InvalidInterval,
    InvalidPartySize,
    InvalidTransition,
    TableNotFound,
)
from tablebook.services.reservation_writer import ReservationWriter

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
    engine = _build_test_engine(tmp_path / "writer.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    with testing_session_local() as session:
        restaurant = Restaurant(name="Bistro")
        other = Restaurant(name="Elsewhere")
        session.add_all([restaurant, other])
        session.flush()
        area = Area(restaurant_id=restaurant.id, name="Main Hall")
        session.add(area)
        session.flush()
        small = Table(area_id=area.id, number="T1", capacity=2)
        large = Table(area_id=area.id, number="T2", capacity=8, min_capacity=4)
        session.add_all([small, large])
        session.commit()
        ids = {"restaurant": restaurant.id, "other": other.id, "T1": small.id, "T2": large.id}
    return testing_session_local, ids


def _book(writer: ReservationWriter, ids: dict[str, int], start: datetime, end: datetime, **kwargs) -> Reservation:
    return writer.create_reservation(
        restaurant_id=ids["restaurant"],
        table_id=kwargs.pop("table_id", ids["T1"]),
        start=start,
        end=end,
        party_size=kwargs.pop("party_size", 2),
        **kwargs,
    )


def test_create_reservation_persists_span(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        reservation = _book(ReservationWriter(session), ids, _at(18), _at(20), guest_name="Ada")

        assert reservation.id is not None
        assert reservation.status == "pending"
        assert reservation.reservation_date == MONDAY
        assert reservation.reservation_time == time(18, 0)
        assert (reservation.start_time, reservation.end_time) == (_at(18), _at(20))


def test_overlapping_write_is_rejected_and_nothing_is_inserted(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        writer = ReservationWriter(session)
        first = _book(writer, ids, _at(18), _at(20))

        with pytest.raises(ConflictError) as exc_info:
            _book(writer, ids, _at(19), _at(21))

        assert [item.record_id for item in exc_info.value.conflicts] == [first.id]
        assert len(session.scalars(select(Reservation)).all()) == 1

        back_to_back = _book(writer, ids, _at(20), _at(22))
        assert back_to_back.id != first.id


def test_party_must_fit_table(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        writer = ReservationWriter(session)
        with pytest.raises(InvalidPartySize):
            _book(writer, ids, _at(18), _at(20), party_size=3)
        with pytest.raises(InvalidPartySize):
            _book(writer, ids, _at(18), _at(20), table_id=ids["T2"], party_size=2)


def test_invalid_requests_are_rejected(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        writer = ReservationWriter(session)
        with pytest.raises(InvalidInterval):
            _book(writer, ids, _at(20), _at(18))
        with pytest.raises(InvalidTransition):
            _book(writer, ids, _at(18), _at(20), status="seated")
        with pytest.raises(TableNotFound):
            _book(writer, ids, _at(18), _at(20), table_id=9999)
        with pytest.raises(TableNotFound):
            writer.create_reservation(
                restaurant_id=ids["other"],
                table_id=ids["T1"],
                start=_at(18),
                end=_at(20),
                party_size=2,
            )


def test_unreadable_constraints_fail_closed(floor, monkeypatch) -> None:
    session_local, ids = floor

    def _broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(busy_intervals, "_fetch_maintenance", _broken)
    with session_local() as session:
        with pytest.raises(DataUnavailable):
            _book(ReservationWriter(session), ids, _at(18), _at(20))
        assert session.scalars(select(Reservation)).all() == []


def test_reschedule_ignores_own_span_but_not_others(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        writer = ReservationWriter(session)
        moving = _book(writer, ids, _at(18), _at(20))
        other = _book(writer, ids, _at(21), _at(23))

        moved = writer.reschedule_reservation(moving.id, start=_at(18, 30), end=_at(20, 30))
        assert (moved.start_time, moved.end_time) == (_at(18, 30), _at(20, 30))

        with pytest.raises(ConflictError) as exc_info:
            writer.reschedule_reservation(moving.id, start=_at(20), end=_at(22))
        assert [item.record_id for item in exc_info.value.conflicts] == [other.id]

        session.refresh(moving)
        assert moving.start_time == _at(18, 30)


def test_maintenance_cannot_overlap_a_booking(floor) -> None:
    session_local, ids = floor
    with session_local() as session:
        writer = ReservationWriter(session)
        _book(writer, ids, _at(18), _at(20))

        with pytest.raises(ConflictError):
            writer.schedule_maintenance(table_id=ids["T1"], start=_at(19), end=_at(19, 30), reason="Fix leg")

        record = writer.schedule_maintenance(table_id=ids["T1"], start=_at(20), end=_at(21), reason="Fix leg")
        assert record.status == "scheduled"
        assert session.scalars(select(TableMaintenance)).all() == [record]


def test_concurrent_writers_cannot_double_book(floor) -> None:
    session_local, ids = floor

    def _attempt(guest: str) -> str:
        with session_local() as session:
            try:
                _book(ReservationWriter(session), ids, _at(18), _at(20), guest_name=guest)
            except ConflictError:
                return "conflict"
            return "booked"

    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(_attempt, ["a", "b", "c", "d"]))

    assert sorted(outcomes) == ["booked", "conflict", "conflict", "conflict"]
    with session_local() as session:
        assert len(session.scalars(select(Reservation)).all()) == 1
