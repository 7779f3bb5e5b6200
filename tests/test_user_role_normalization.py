"""Role normalization tests for staff user creation."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from tablebook.db.base import Base
from tablebook.services.user_service import create_user


def test_create_user_normalizes_lowercase_role() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        user = create_user(
            db=session,
            username="new-host",
            hashed_password="hash",
            role=" staff ",
            email="new-host@example.com",
        )

    assert user.role == "STAFF"


def test_create_user_rejects_unknown_role() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        with pytest.raises(ValueError, match="Unknown role"):
            create_user(
                db=session,
                username="new-chef",
                hashed_password="hash",
                role="chef",
                email="new-chef@example.com",
            )
