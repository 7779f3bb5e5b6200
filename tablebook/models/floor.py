"""Dining room areas and tables."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tablebook.db.base import Base


class Area(Base):
    """Named section of a restaurant floor (terrace, main hall, ...)."""

    __tablename__ = "areas"

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    restaurant: Mapped["Restaurant"] = relationship(back_populates="areas")
    tables: Mapped[list["Table"]] = relationship(back_populates="area")


class Table(Base):
    """Bookable table with guest capacity bounds."""

    __tablename__ = "tables"
    __table_args__ = (
        CheckConstraint("min_capacity >= 1", name="ck_tables_min_capacity_positive"),
        CheckConstraint("min_capacity <= capacity", name="ck_tables_min_capacity_le_capacity"),
        UniqueConstraint("area_id", "number", name="uq_tables_area_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    area_id: Mapped[int] = mapped_column(ForeignKey("areas.id"), nullable=False, index=True)
    number: Mapped[str] = mapped_column(String(32), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    shape: Mapped[str] = mapped_column(String(32), nullable=False, default="rectangle")
    is_accessible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    area: Mapped[Area] = relationship(back_populates="tables")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="table")
    maintenance_records: Mapped[list["TableMaintenance"]] = relationship(back_populates="table")
