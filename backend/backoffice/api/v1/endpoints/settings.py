"""
Settings API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.session import get_db
from backoffice.controllers.settings_controller import SettingsController
from backoffice.schemas.settings import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    HourlyRateResponse,
    HourlyRateUpdate,
)

router = APIRouter()


@router.get("/hourly-rate", response_model=HourlyRateResponse)
async def get_hourly_rate(db: AsyncSession = Depends(get_db)) -> HourlyRateResponse:
    return await SettingsController(db).get_hourly_rate()


@router.put("/hourly-rate", response_model=HourlyRateResponse)
async def set_hourly_rate(
    data: HourlyRateUpdate,
    db: AsyncSession = Depends(get_db),
) -> HourlyRateResponse:
    return await SettingsController(db).set_hourly_rate(data)


@router.get("/business-profile", response_model=BusinessProfileResponse)
async def get_business_profile(db: AsyncSession = Depends(get_db)) -> BusinessProfileResponse:
    return await SettingsController(db).get_business_profile()


@router.put("/business-profile", response_model=BusinessProfileResponse)
async def set_business_profile(
    data: BusinessProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> BusinessProfileResponse:
    """Partially update the business profile."""
    return await SettingsController(db).set_business_profile(data)
