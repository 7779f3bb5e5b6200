"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    """Payload for staff self-registration."""

    email: str
    password: str
    restaurant_id: int
    role: str = "STAFF"


class UserCreateRequest(BaseModel):
    """Payload for accounts created by an admin or manager."""

    email: str
    password: str
    role: str
    restaurant_id: int


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """JWT response payload."""

    access_token: str
    token_type: str = "bearer"


class AuthUserResponse(BaseModel):
    """User response for auth endpoints."""

    id: int
    email: str | None = None
    role: str
    restaurant_id: int | None = None

    model_config = ConfigDict(from_attributes=True)
