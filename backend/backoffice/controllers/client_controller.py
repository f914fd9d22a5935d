"""
Client controller.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.services.client_service import ClientService
from backoffice.schemas.client import (
    ClientCreate,
    ClientListResponse,
    ClientResponse,
    ClientUpdate,
    PortalTokenResponse,
)


class ClientController(BaseController):
    """Controller for client operations."""

    def __init__(self, session: AsyncSession):
        self.client_service = ClientService(session)

    async def create_client(self, client_data: ClientCreate) -> ClientResponse:
        return await self.client_service.create_client(client_data)

    async def get_client(self, client_id: UUID) -> ClientResponse:
        return await self.client_service.get_client(client_id)

    async def list_clients(self) -> ClientListResponse:
        clients, total = await self.client_service.list_clients()
        return ClientListResponse(items=clients, total=total)

    async def update_client(self, client_id: UUID, client_data: ClientUpdate) -> ClientResponse:
        return await self.client_service.update_client(client_id, client_data)

    async def delete_client(self, client_id: UUID) -> None:
        await self.client_service.delete_client(client_id)

    async def regenerate_portal_token(self, client_id: UUID) -> PortalTokenResponse:
        return await self.client_service.regenerate_portal_token(client_id)
