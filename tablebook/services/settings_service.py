"""Restaurant settings helpers."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tablebook.core.config import settings
from tablebook.models.restaurant import RestaurantSetting
from tablebook.services.errors import DataUnavailable

logger = logging.getLogger(__name__)


def get_default_duration(db: Session, restaurant_id: int) -> int:
    """Return restaurant reservation length in minutes with configured fallback."""
    try:
        setting: RestaurantSetting | None = (
            db.query(RestaurantSetting).filter(RestaurantSetting.restaurant_id == restaurant_id).first()
        )
    except SQLAlchemyError as exc:
        logger.exception("[SETTINGS] Failed to load settings for restaurant_id=%s", restaurant_id)
        raise DataUnavailable("restaurant settings") from exc
    if setting is None or not setting.default_reservation_duration:
        return settings.default_reservation_duration
    return setting.default_reservation_duration
