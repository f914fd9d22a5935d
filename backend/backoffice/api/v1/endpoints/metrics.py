"""
Dashboard metric endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.session import get_db
from backoffice.controllers.metrics_controller import MetricsController
from backoffice.schemas.metrics import EarningsMtdResponse, HoursMtdResponse

router = APIRouter()


@router.get("/hours-mtd", response_model=HoursMtdResponse)
async def hours_mtd(db: AsyncSession = Depends(get_db)) -> HoursMtdResponse:
    """Hours tracked this month, served from cache for up to ten minutes."""
    return await MetricsController(db).hours_mtd()


@router.get("/earnings-mtd", response_model=EarningsMtdResponse)
async def earnings_mtd(db: AsyncSession = Depends(get_db)) -> EarningsMtdResponse:
    return await MetricsController(db).earnings_mtd()
