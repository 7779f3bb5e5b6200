"""Automatic table assignment with nearby-time suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from tablebook.services.availability_service import find_available_tables
from tablebook.services.eligibility import TableSnapshot
from tablebook.services.intervals import BoundedInterval, duration

SUGGESTION_OFFSETS_MINUTES: tuple[int, ...] = (-60, -30, 30, 60)
MAX_SUGGESTIONS: int = 3
MAX_ALTERNATIVES: int = 3


@dataclass(frozen=True)
class AssignmentPreferences:
    area_id: int | None = None
    shape: str | None = None
    zone: str | None = None
    accessible: bool = False


@dataclass(frozen=True)
class ScoredTable:
    table: TableSnapshot
    score: float
    reasons: dict[str, int]


@dataclass
class AssignmentResult:
    window: BoundedInterval
    assigned: bool
    best: ScoredTable | None = None
    alternatives: list[TableSnapshot] = field(default_factory=list)
    suggestions: list[dict[str, object]] = field(default_factory=list)
    reason: str | None = None


def score_table(table: TableSnapshot, party_size: int, preferences: AssignmentPreferences) -> ScoredTable:
    """Score a free table; a snug fit weighs most, then the guest's preferences."""
    capacity_fit = 1 - (table.capacity - party_size) / table.capacity
    area_match = preferences.area_id is not None and table.area_id == preferences.area_id
    shape_match = preferences.shape is not None and table.shape == preferences.shape
    zone_match = bool(preferences.zone) and preferences.zone.lower() in table.area_name.lower()
    accessible_match = preferences.accessible and table.is_accessible

    score = capacity_fit * 40
    score += 30 if area_match else 0
    score += 10 if shape_match else 0
    score += 10 if zone_match else 0
    score += 10 if accessible_match else 0
    return ScoredTable(
        table=table,
        score=score,
        reasons={
            "capacity_fit": round(capacity_fit * 100),
            "area_match": 100 if area_match else 0,
            "shape_match": 100 if shape_match else 0,
            "zone_match": 100 if zone_match else 0,
            "accessibility": 100 if accessible_match else 0,
        },
    )


def assign_table(
    db: Session,
    *,
    restaurant_id: int,
    start: datetime,
    party_size: int,
    duration_minutes: int | None = None,
    area_id: int | None = None,
    preferences: AssignmentPreferences | None = None,
) -> AssignmentResult:
    """Pick the best free table for a request.

    ``area_id`` restricts the search; ``preferences`` only weight the score.
    When nothing is free, up to three start times within an hour either side
    that do have a free table are suggested instead.
    """
    prefs = preferences or AssignmentPreferences()
    search = find_available_tables(
        db,
        restaurant_id=restaurant_id,
        start=start,
        party_size=party_size,
        duration_minutes=duration_minutes,
        area_id=area_id,
    )
    candidates = search.tables
    if prefs.accessible:
        candidates = [table for table in candidates if table.is_accessible]

    if not candidates:
        return AssignmentResult(
            window=search.window,
            assigned=False,
            reason="No tables available for the requested criteria",
            suggestions=_suggest_times(db, restaurant_id, search.window, party_size, area_id, prefs.accessible),
        )

    scored = sorted(
        (score_table(table, search.party_size, prefs) for table in candidates),
        key=lambda item: (-item.score, item.table.capacity, item.table.id),
    )
    return AssignmentResult(
        window=search.window,
        assigned=True,
        best=scored[0],
        alternatives=[item.table for item in scored[1 : 1 + MAX_ALTERNATIVES]],
    )


def _suggest_times(
    db: Session,
    restaurant_id: int,
    window: BoundedInterval,
    party_size: int,
    area_id: int | None,
    accessible_only: bool,
) -> list[dict[str, object]]:
    length_minutes = int(duration(window).total_seconds() // 60)
    suggestions: list[dict[str, object]] = []
    for offset in SUGGESTION_OFFSETS_MINUTES:
        alternative = window.start + timedelta(minutes=offset)
        search = find_available_tables(
            db,
            restaurant_id=restaurant_id,
            start=alternative,
            party_size=party_size,
            duration_minutes=length_minutes,
            area_id=area_id,
        )
        tables = [table for table in search.tables if table.is_accessible] if accessible_only else search.tables
        if tables:
            suggestions.append({"time": alternative.strftime("%H:%M"), "available": True, "tables_count": len(tables)})
        if len(suggestions) >= MAX_SUGGESTIONS:
            break
    return suggestions
