"""
Client API endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from backoffice.db.session import get_db
from backoffice.controllers.client_controller import ClientController
from backoffice.schemas.client import (
    ClientCreate,
    ClientListResponse,
    ClientResponse,
    ClientUpdate,
    PortalTokenResponse,
)

router = APIRouter()


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Create a new client."""
    controller = ClientController(db)
    return await controller.create_client(client_data)


@router.get("", response_model=ClientListResponse)
async def list_clients(
    db: AsyncSession = Depends(get_db),
) -> ClientListResponse:
    """List clients, newest first."""
    controller = ClientController(db)
    return await controller.list_clients()


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Get client by ID."""
    controller = ClientController(db)
    return await controller.get_client(client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: UUID,
    client_data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
) -> ClientResponse:
    """Partially update a client."""
    controller = ClientController(db)
    return await controller.update_client(client_id, client_data)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a client with no timesheets or invoices."""
    controller = ClientController(db)
    await controller.delete_client(client_id)


@router.post("/{client_id}/regenerate-token", response_model=PortalTokenResponse)
async def regenerate_token(
    client_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> PortalTokenResponse:
    """Issue a new portal token. Previously issued tokens stay valid until they expire."""
    controller = ClientController(db)
    return await controller.regenerate_portal_token(client_id)
