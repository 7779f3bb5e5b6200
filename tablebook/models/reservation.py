"""Reservation model."""

from datetime import date, datetime, time, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tablebook.db.base import Base

RESERVATION_STATUSES: tuple[str, ...] = ("pending", "confirmed", "seated", "completed", "cancelled", "no_show")


class Reservation(Base):
    """Guest booking for a table and time window.

    Spans are stored as naive restaurant-local datetimes. Legacy rows may carry
    only ``reservation_date`` + ``reservation_time``; the availability engine
    derives their end from the restaurant default duration.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        Index("ix_reservations_table_start", "table_id", "start_time"),
        Index("ix_reservations_restaurant_date", "restaurant_id", "reservation_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False)
    table_id: Mapped[int | None] = mapped_column(ForeignKey("tables.id"), nullable=True)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False)
    reservation_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    guest_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    status_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    seated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    table: Mapped["Table | None"] = relationship(back_populates="reservations")
