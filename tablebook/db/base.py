"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from tablebook.models import floor as _floor  # noqa: E402,F401
from tablebook.models import maintenance as _maintenance  # noqa: E402,F401
from tablebook.models import reservation as _reservation  # noqa: E402,F401
from tablebook.models import restaurant as _restaurant  # noqa: E402,F401
from tablebook.models import user as _user  # noqa: E402,F401
