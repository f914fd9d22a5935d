"""
Dashboard metrics controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.deps.di_container import Container, get_container
from backoffice.services.metrics_service import MetricsService
from backoffice.schemas.metrics import EarningsMtdResponse, HoursMtdResponse


class MetricsController(BaseController):
    """Controller for dashboard metrics."""

    def __init__(self, session: AsyncSession, container: Optional[Container] = None):
        container = container or get_container()
        self.metrics_service = MetricsService(
            session,
            toggl_client=container.toggl_client(),
            cache=container.cache(),
        )

    async def hours_mtd(self) -> HoursMtdResponse:
        return await self.metrics_service.hours_mtd()

    async def earnings_mtd(self) -> EarningsMtdResponse:
        return await self.metrics_service.earnings_mtd()
