"""
Dashboard metrics service.
Month-to-date hours from Toggl, cached so the dashboard does not hit the API on every load.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.cache import CacheResult, MemoryCache
from backoffice.core.config import settings
from backoffice.core.integrations.toggl.toggl_client import MonthToDateHours, TogglClient
from backoffice.schemas.metrics import EarningsMtdResponse, HoursMtdResponse
from backoffice.services.base_service import BaseService
from backoffice.services.invoice_service import calculate_amount
from backoffice.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


def hours_cache_key(month: str) -> str:
    return f"toggl:hours-mtd:{month}"


class MetricsService(BaseService):
    """Service for dashboard metrics."""

    def __init__(
        self,
        session: AsyncSession,
        toggl_client: TogglClient,
        cache: MemoryCache,
        ttl_seconds: Optional[int] = None,
    ):
        self.toggl_client = toggl_client
        self.cache = cache
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.METRICS_CACHE_TTL_SECONDS
        self.settings_service = SettingsService(session)

    async def _cached_hours(self) -> CacheResult[MonthToDateHours]:
        month = datetime.now(tz=timezone.utc).strftime("%Y-%m")
        result = await self.cache.get_or_fetch(
            hours_cache_key(month),
            self.toggl_client.fetch_month_to_date_hours,
            self.ttl_seconds,
        )
        if result.is_stale:
            logger.warning("Serving stale month-to-date hours", extra={"month": month})
        return result

    async def hours_mtd(self) -> HoursMtdResponse:
        result = await self._cached_hours()
        return HoursMtdResponse(
            hours=result.data.total_hours,
            month=result.data.month,
            entry_count=result.data.entry_count,
            is_stale=result.is_stale,
            cached_at=result.cached_at,
        )

    async def earnings_mtd(self) -> EarningsMtdResponse:
        """Month-to-date hours priced at the current hourly rate."""
        result = await self._cached_hours()
        rate = await self.settings_service.get_hourly_rate_decimal()

        earnings: Optional[Decimal] = None
        if rate is not None:
            earnings = calculate_amount(result.data.total_hours, rate)

        return EarningsMtdResponse(
            earnings=earnings,
            hours=result.data.total_hours,
            hourly_rate=rate,
            month=result.data.month,
            is_stale=result.is_stale,
            cached_at=result.cached_at,
        )
