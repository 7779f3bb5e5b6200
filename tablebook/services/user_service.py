"""User service operations."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from tablebook.models.user import User, normalize_user_role


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email).limit(1))


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(
    db: Session,
    username: str,
    hashed_password: str,
    role: str,
    email: str | None = None,
    restaurant_id: int | None = None,
) -> User:
    user = User(
        username=username,
        password_hash=hashed_password,
        role=normalize_user_role(role),
        email=email,
        restaurant_id=restaurant_id,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def mark_login(db: Session, user: User) -> None:
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
