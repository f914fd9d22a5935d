"""
API v1 router that aggregates all endpoint routers.
Admin routes require the platform principal; portal routes authenticate with their own token.
"""

from fastapi import APIRouter, Depends
from backoffice.api.v1.middleware import require_platform_principal

from backoffice.api.v1.endpoints import (
    health,
    clients,
    timesheets,
    invoices,
    settings,
    metrics,
    toggl,
    portal,
)

api_router = APIRouter()

# Public routes
api_router.include_router(health.router, tags=["health"])
api_router.include_router(portal.router, prefix="/portal", tags=["portal"])

# Admin routes (authentication enforced at the router level)
api_router.include_router(
    clients.router,
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(require_platform_principal)],
)
api_router.include_router(
    timesheets.router,
    prefix="/timesheets",
    tags=["timesheets"],
    dependencies=[Depends(require_platform_principal)],
)
api_router.include_router(
    invoices.router,
    prefix="/invoices",
    tags=["invoices"],
    dependencies=[Depends(require_platform_principal)],
)
api_router.include_router(
    settings.router,
    prefix="/settings",
    tags=["settings"],
    dependencies=[Depends(require_platform_principal)],
)
api_router.include_router(
    metrics.router,
    prefix="/metrics",
    tags=["metrics"],
    dependencies=[Depends(require_platform_principal)],
)
api_router.include_router(
    toggl.router,
    prefix="/toggl",
    tags=["toggl"],
    dependencies=[Depends(require_platform_principal)],
)
