"""
Database bootstrapping.
Creates tables from model metadata when AUTO_CREATE_TABLES is set.
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from backoffice.db.base import Base
from backoffice.core.logging import get_logger

# Registers every model with Base.metadata
import backoffice.models  # noqa: F401

logger = get_logger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all database tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized", extra={"tables": sorted(Base.metadata.tables)})
