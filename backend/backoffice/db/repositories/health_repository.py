"""
Health repository.
Provides database health check functionality.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

logger = logging.getLogger(__name__)


class HealthRepository:
    """Repository for health check operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_database(self) -> bool:
        """True when a trivial query round-trips through the database."""
        try:
            result = await self.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return result.scalar() == 1
