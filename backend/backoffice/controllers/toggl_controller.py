"""
Toggl import controller.
Lists workspace clients and flags the ones already linked locally.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.db.repositories.client_repository import ClientRepository
from backoffice.deps.di_container import Container, get_container
from backoffice.schemas.toggl import TogglClientListResponse, TogglClientResponse, TogglConnectionResponse


class TogglController(BaseController):
    """Controller for Toggl lookups."""

    def __init__(self, session: AsyncSession, container: Optional[Container] = None):
        container = container or get_container()
        self.toggl_client = container.toggl_client()
        self.client_repo = ClientRepository(session)

    async def list_clients(self) -> TogglClientListResponse:
        toggl_clients = await self.toggl_client.fetch_clients()
        local_clients = await self.client_repo.list(limit=1000)
        linked = {c.toggl_client_id for c in local_clients if c.toggl_client_id}

        return TogglClientListResponse(
            items=[
                TogglClientResponse(
                    id=c.id,
                    name=c.name,
                    notes=c.notes,
                    imported=str(c.id) in linked,
                )
                for c in toggl_clients
            ]
        )

    async def verify_connection(self) -> TogglConnectionResponse:
        return TogglConnectionResponse(**await self.toggl_client.verify_connection())
