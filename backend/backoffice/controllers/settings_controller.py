"""
Settings controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.services.settings_service import SettingsService
from backoffice.schemas.settings import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    HourlyRateResponse,
    HourlyRateUpdate,
)


class SettingsController(BaseController):
    """Controller for settings operations."""

    def __init__(self, session: AsyncSession):
        self.settings_service = SettingsService(session)

    async def get_hourly_rate(self) -> HourlyRateResponse:
        return await self.settings_service.get_hourly_rate()

    async def set_hourly_rate(self, data: HourlyRateUpdate) -> HourlyRateResponse:
        return await self.settings_service.set_hourly_rate(data.rate)

    async def get_business_profile(self) -> BusinessProfileResponse:
        return await self.settings_service.get_business_profile()

    async def set_business_profile(self, data: BusinessProfileUpdate) -> BusinessProfileResponse:
        return await self.settings_service.set_business_profile(data)
