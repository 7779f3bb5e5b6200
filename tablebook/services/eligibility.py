"""Table eligibility: which tables can seat a given party."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from tablebook.models.floor import Area, Table
from tablebook.services.errors import DataUnavailable, InvalidPartySize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only copy of a table row with its area name."""

    id: int
    number: str
    capacity: int
    min_capacity: int
    area_id: int
    area_name: str
    is_active: bool = True
    is_accessible: bool = False
    shape: str = "rectangle"

    @classmethod
    def from_model(cls, table: Table) -> TableSnapshot:
        return cls(
            id=table.id,
            number=table.number,
            capacity=table.capacity,
            min_capacity=table.min_capacity,
            area_id=table.area_id,
            area_name=table.area.name if table.area is not None else "Unknown",
            is_active=table.is_active,
            is_accessible=table.is_accessible,
            shape=table.shape,
        )

    def seats(self, party_size: int) -> bool:
        return self.min_capacity <= party_size <= self.capacity


def validate_party_size(value: object) -> int:
    """Return party size as int or raise InvalidPartySize."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPartySize(f"party size must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidPartySize(f"party size must be positive, got {value}")
    return value


def filter_eligible_tables(
    tables: Iterable[TableSnapshot],
    party_size: int,
    *,
    area_id: int | None = None,
    zone: str | None = None,
) -> list[TableSnapshot]:
    """Return active tables that can seat the party, smallest adequate table first.

    ``zone`` matches case-insensitively against the area name.
    """
    size = validate_party_size(party_size)
    zone_key = zone.strip().lower() if zone else None
    eligible = [
        table
        for table in tables
        if table.is_active
        and table.seats(size)
        and (area_id is None or table.area_id == area_id)
        and (zone_key is None or zone_key in table.area_name.lower())
    ]
    return sorted(eligible, key=lambda table: (table.capacity, table.number, table.id))


def load_table_catalog(db: Session, restaurant_id: int, area_id: int | None = None) -> list[TableSnapshot]:
    """Return active tables in active areas of a restaurant."""
    stmt = (
        select(Table)
        .join(Area, Area.id == Table.area_id)
        .options(joinedload(Table.area))
        .where(
            Area.restaurant_id == restaurant_id,
            Area.is_active.is_(True),
            Table.is_active.is_(True),
        )
        .order_by(Table.id.asc())
    )
    if area_id is not None:
        stmt = stmt.where(Table.area_id == area_id)
    try:
        tables = db.scalars(stmt).all()
    except SQLAlchemyError as exc:
        logger.exception("[AVAILABILITY] Failed to load table catalog for restaurant_id=%s", restaurant_id)
        raise DataUnavailable("table catalog") from exc
    return [TableSnapshot.from_model(table) for table in tables]
