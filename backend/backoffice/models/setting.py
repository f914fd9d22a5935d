"""
Key/value application settings stored as JSON.
"""

from sqlalchemy import Column, String, DateTime, JSON

from backoffice.db.base import Base, utcnow


class Setting(Base):
    """A single named setting, e.g. ``hourlyRate`` or ``businessProfile``."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
