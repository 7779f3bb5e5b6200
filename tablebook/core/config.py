"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "tablebook API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./tablebook.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_email: str = getenv("ADMIN_EMAIL", "")
    admin_password: str = getenv("ADMIN_PASSWORD", "")
    default_reservation_duration: int = int(getenv("DEFAULT_RESERVATION_DURATION", "120"))
    availability_degrade_on_error: bool = getenv("AVAILABILITY_DEGRADE_ON_ERROR", "1") == "1"


settings: Settings = Settings()
