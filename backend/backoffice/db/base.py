"""
SQLAlchemy declarative base for models.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current time used for column defaults."""
    return datetime.now(tz=timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass
