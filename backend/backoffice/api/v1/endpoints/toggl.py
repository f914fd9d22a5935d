"""
Toggl lookup endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.session import get_db
from backoffice.controllers.toggl_controller import TogglController
from backoffice.schemas.toggl import TogglClientListResponse, TogglConnectionResponse

router = APIRouter()


@router.get("/clients", response_model=TogglClientListResponse)
async def list_toggl_clients(db: AsyncSession = Depends(get_db)) -> TogglClientListResponse:
    """Workspace clients available for import."""
    return await TogglController(db).list_clients()


@router.get("/verify", response_model=TogglConnectionResponse)
async def verify_toggl_connection(db: AsyncSession = Depends(get_db)) -> TogglConnectionResponse:
    """Check the configured Toggl credentials."""
    return await TogglController(db).verify_connection()
