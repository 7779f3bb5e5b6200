"""Automatic table assignment tests."""

from datetime import date, datetime, time
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from tablebook.db.base import Base
from tablebook.models.floor import Area, Table
from tablebook.models.reservation import Reservation
from tablebook.models.restaurant import Restaurant
from tablebook.services.assignment_service import AssignmentPreferences, assign_table, score_table
from tablebook.services.eligibility import TableSnapshot

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
    engine = _build_test_engine(tmp_path / "assign.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    with testing_session_local() as session:
        restaurant = Restaurant(name="Bistro")
        session.add(restaurant)
        session.flush()
        hall = Area(restaurant_id=restaurant.id, name="Main Hall")
        terrace = Area(restaurant_id=restaurant.id, name="Garden Terrace")
        session.add_all([hall, terrace])
        session.flush()
        session.add_all(
            [
                Table(area_id=hall.id, number="H1", capacity=2),
                Table(area_id=hall.id, number="H2", capacity=6),
                Table(area_id=terrace.id, number="G1", capacity=4, shape="round", is_accessible=True),
            ]
        )
        session.commit()
        yield session, {"restaurant": restaurant.id, "hall": hall.id, "terrace": terrace.id}


def test_snug_fit_scores_highest_without_preferences() -> None:
    snug = TableSnapshot(id=1, number="A", capacity=2, min_capacity=1, area_id=1, area_name="Hall")
    roomy = TableSnapshot(id=2, number="B", capacity=8, min_capacity=1, area_id=1, area_name="Hall")
    prefs = AssignmentPreferences()

    assert score_table(snug, 2, prefs).score == 40
    assert score_table(roomy, 2, prefs).score == 10
    assert score_table(snug, 2, prefs).reasons["capacity_fit"] == 100


def test_best_table_and_alternatives(floor) -> None:
    session, ids = floor

    result = assign_table(session, restaurant_id=ids["restaurant"], start=_at(19), party_size=2)

    assert result.assigned is True
    assert result.best.table.number == "H1"
    assert [table.number for table in result.alternatives] == ["G1", "H2"]


def test_preferences_outweigh_snug_fit(floor) -> None:
    session, ids = floor

    result = assign_table(
        session,
        restaurant_id=ids["restaurant"],
        start=_at(19),
        party_size=2,
        preferences=AssignmentPreferences(area_id=ids["terrace"], shape="round", zone="garden"),
    )

    assert result.best.table.number == "G1"
    assert result.best.reasons["area_match"] == 100
    assert result.best.reasons["shape_match"] == 100


def test_accessible_request_only_considers_accessible_tables(floor) -> None:
    session, ids = floor

    result = assign_table(
        session,
        restaurant_id=ids["restaurant"],
        start=_at(19),
        party_size=2,
        preferences=AssignmentPreferences(accessible=True),
    )

    assert result.best.table.number == "G1"
    assert result.alternatives == []


def test_fully_booked_request_suggests_nearby_times(floor) -> None:
    session, ids = floor
    table = session.query(Table).filter(Table.number == "H2").one()
    session.add(
        Reservation(
            restaurant_id=ids["restaurant"],
            table_id=table.id,
            reservation_date=MONDAY,
            reservation_time=time(19, 0),
            start_time=_at(19),
            end_time=_at(21),
            party_size=6,
            status="confirmed",
        )
    )
    session.commit()

    result = assign_table(session, restaurant_id=ids["restaurant"], start=_at(20), party_size=6, duration_minutes=60)

    assert result.assigned is False
    assert result.best is None
    assert result.reason == "No tables available for the requested criteria"
    assert [item["time"] for item in result.suggestions] == ["21:00"]


def test_accessible_request_only_suggests_times_with_accessible_tables(floor) -> None:
    session, ids = floor
    table = session.query(Table).filter(Table.number == "G1").one()
    session.add(
        Reservation(
            restaurant_id=ids["restaurant"],
            table_id=table.id,
            reservation_date=MONDAY,
            reservation_time=time(19, 0),
            start_time=_at(19),
            end_time=_at(22),
            party_size=2,
            status="confirmed",
        )
    )
    session.commit()

    result = assign_table(
        session,
        restaurant_id=ids["restaurant"],
        start=_at(20),
        party_size=2,
        duration_minutes=60,
        preferences=AssignmentPreferences(accessible=True),
    )

    assert result.assigned is False
    assert result.suggestions == []
