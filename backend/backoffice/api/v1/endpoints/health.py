"""
Health check endpoint.
Returns system status and uptime information.
"""

from fastapi import APIRouter

from backoffice.schemas.health import HealthResponse
from backoffice.deps.di_container import get_container

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health() -> HealthResponse:
    """
    Health check endpoint.
    Returns system status, uptime, and database check.
    """
    controller = get_container().health_controller()
    return await controller.get_health()
