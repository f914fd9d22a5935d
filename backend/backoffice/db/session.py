"""
Database session management with async SQLAlchemy 2.0.
Handles connection pooling and session lifecycle.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from typing import AsyncGenerator, Optional

from backoffice.core.config import settings
from backoffice.core.logging import get_logger

logger = get_logger(__name__)

# Global engine and sessionmaker
engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create async SQLAlchemy engine with connection pooling."""
    global engine

    url = database_url or settings.DATABASE_URL
    engine_kwargs = {"echo": False}

    # SQLite uses a single-file pool; sizing only applies to server databases
    if not url.startswith("sqlite"):
        engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

    engine = create_async_engine(url, **engine_kwargs)

    logger.info(
        "Database engine created",
        extra={"dialect": engine.dialect.name},
    )

    return engine


def create_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Create async sessionmaker."""
    global async_session_maker

    if engine is None:
        create_engine()

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    logger.info("Sessionmaker created")
    return async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session.
    Commits when the request handler succeeds, rolls back otherwise.
    """
    if async_session_maker is None:
        create_sessionmaker()

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database connection."""
    if engine is None:
        create_engine()

    if async_session_maker is None:
        create_sessionmaker()

    logger.info("Database initialized")


async def close_db() -> None:
    """Close database connections."""
    if engine:
        await engine.dispose()
        logger.info("Database connections closed")
