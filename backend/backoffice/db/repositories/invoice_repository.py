"""
Invoice repository for database operations.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backoffice.db.repositories.base_repository import BaseRepository
from backoffice.models.invoice import Invoice


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for invoice operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Invoice, session)

    async def get_by_timesheet(self, timesheet_id: UUID) -> Optional[Invoice]:
        """Most recent invoice generated from a timesheet."""
        result = await self.session.execute(
            select(Invoice)
            .where(Invoice.timesheet_id == timesheet_id)
            .order_by(Invoice.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
