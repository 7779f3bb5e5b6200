"""Authentication endpoints (API JWT)."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tablebook.core.security import (
    create_access_token,
    ensure_restaurant_access,
    get_current_user,
    get_password_hash,
    require_roles,
    verify_password,
)
from tablebook.db.session import get_db
from tablebook.models.restaurant import Restaurant
from tablebook.models.user import User, normalize_user_role
from tablebook.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse, UserCreateRequest
from tablebook.services.user_service import create_user, get_user_by_email, mark_login

router: APIRouter = APIRouter()
SELF_REGISTER_ROLES: set[str] = {"STAFF"}
MANAGED_ROLES: set[str] = {"MANAGER", "STAFF"}


def _create_account(
    db: Session,
    *,
    email: str,
    password: str,
    raw_role: str,
    restaurant_id: int,
    allowed_roles: set[str],
) -> User:
    try:
        role = normalize_user_role(raw_role)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if role not in allowed_roles:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role")
    if db.get(Restaurant, restaurant_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown restaurant")
    if get_user_by_email(db=db, email=email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    try:
        hashed_password = get_password_hash(password)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return create_user(
        db=db,
        username=email,
        hashed_password=hashed_password,
        role=role,
        email=email,
        restaurant_id=restaurant_id,
    )


@router.post("/register", response_model=AuthUserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthUserResponse:
    """Self-registration creates staff accounts bound to one restaurant."""
    user = _create_account(
        db,
        email=payload.email,
        password=payload.password,
        raw_role=payload.role,
        restaurant_id=payload.restaurant_id,
        allowed_roles=SELF_REGISTER_ROLES,
    )
    return AuthUserResponse.model_validate(user)


@router.post("/users", response_model=AuthUserResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: UserCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("ADMIN", "MANAGER")),
) -> AuthUserResponse:
    ensure_restaurant_access(current_user, payload.restaurant_id)
    user = _create_account(
        db,
        email=payload.email,
        password=payload.password,
        raw_role=payload.role,
        restaurant_id=payload.restaurant_id,
        allowed_roles=MANAGED_ROLES,
    )
    return AuthUserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user: User | None = get_user_by_email(db=db, email=payload.email)
    if user is None or not user.is_active or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    mark_login(db, user)
    return TokenResponse(access_token=create_access_token(data={"sub": str(user.id)}))


@router.get("/me", response_model=AuthUserResponse)
def me(current_user: User = Depends(get_current_user)) -> AuthUserResponse:
    return AuthUserResponse.model_validate(current_user)
