"""
Client repository for database operations.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backoffice.db.repositories.base_repository import BaseRepository
from backoffice.models.client import Client
from backoffice.models.invoice import Invoice
from backoffice.models.timesheet import Timesheet


class ClientRepository(BaseRepository[Client]):
    """Repository for client operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Client, session)

    async def get_by_toggl_client_id(self, toggl_client_id: str) -> Optional[Client]:
        """Get client by its Toggl client id."""
        result = await self.session.execute(
            select(Client).where(Client.toggl_client_id == toggl_client_id)
        )
        return result.scalar_one_or_none()

    async def count_references(self, client_id: UUID) -> int:
        """Number of timesheets and invoices pointing at a client."""
        timesheets = await self.session.scalar(
            select(func.count()).select_from(Timesheet).where(Timesheet.client_id == client_id)
        )
        invoices = await self.session.scalar(
            select(func.count()).select_from(Invoice).where(Invoice.client_id == client_id)
        )
        return (timesheets or 0) + (invoices or 0)

    async def delete(self, id: UUID) -> bool:
        """Delete a client through the ORM so its contacts cascade."""
        client = await self.get(id)
        if client is None:
            return False
        await self.session.delete(client)
        await self.session.flush()
        return True
