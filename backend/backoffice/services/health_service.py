"""
Health service.
Provides health check functionality.
"""

import time

from backoffice.core.config import settings
from backoffice.services.base_service import BaseService
from backoffice.schemas.health import HealthResponse


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        from backoffice.db import session as db_session
        from backoffice.db.repositories.health_repository import HealthRepository

        if db_session.async_session_maker is None:
            db_session.create_sessionmaker()

        async with db_session.async_session_maker() as session:
            db_ok = await HealthRepository(session=session).check_database()

        checks = {"database": "ok" if db_ok else "error"}
        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )
