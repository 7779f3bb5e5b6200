"""Restaurant-related ORM models."""

from datetime import datetime, time, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tablebook.db.base import Base


class Restaurant(Base):
    """Represents a restaurant taking table reservations."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    operating_hours: Mapped[list["OperatingHour"]] = relationship(back_populates="restaurant")
    areas: Mapped[list["Area"]] = relationship(back_populates="restaurant")
    setting: Mapped["RestaurantSetting | None"] = relationship(back_populates="restaurant", uselist=False)


class RestaurantSetting(Base):
    """Per-restaurant booking defaults."""

    __tablename__ = "restaurant_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, unique=True)
    default_reservation_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=120)

    restaurant: Mapped[Restaurant] = relationship(back_populates="setting")


class OperatingHour(Base):
    """One operating shift of a restaurant on a weekday (0=Sunday..6=Saturday)."""

    __tablename__ = "operating_hours"
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_operating_hours_day_of_week"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    open_time: Mapped[time] = mapped_column(Time, nullable=False)
    close_time: Mapped[time] = mapped_column(Time, nullable=False)
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    restaurant: Mapped[Restaurant] = relationship(back_populates="operating_hours")
