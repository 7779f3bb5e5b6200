"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from tablebook.core.config import settings
from tablebook.core.security import get_password_hash
from tablebook.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def ensure_admin_user(session: Session) -> bool:
    """Ensure the configured admin account exists in development; return whether one is present."""
    if settings.app_env != "dev" or not settings.admin_email or not settings.admin_password:
        return False

    if get_user_by_email(db=session, email=settings.admin_email) is not None:
        return True

    try:
        hashed_password = get_password_hash(settings.admin_password)
    except ValueError as exc:
        logger.warning("[BOOTSTRAP] Skipping admin seed: %s", exc)
        return False

    create_user(
        db=session,
        username=settings.admin_email.split("@")[0],
        email=settings.admin_email,
        hashed_password=hashed_password,
        role="ADMIN",
    )
    logger.info("[BOOTSTRAP] Created admin user %s", settings.admin_email)
    return True
