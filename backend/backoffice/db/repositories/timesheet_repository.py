"""
Timesheet repository for database operations.
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backoffice.db.repositories.base_repository import BaseRepository
from backoffice.models.timesheet import Timesheet


class TimesheetRepository(BaseRepository[Timesheet]):
    """Repository for timesheet operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Timesheet, session)

    async def get_by_client_and_month(
        self,
        client_id: UUID,
        month: str,
    ) -> Optional[Timesheet]:
        """Get the timesheet for a client and month, if any."""
        result = await self.session.execute(
            select(Timesheet).where(
                Timesheet.client_id == client_id,
                Timesheet.month == month,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_client(self, client_id: UUID) -> List[Timesheet]:
        """All of a client's timesheets, latest month first."""
        result = await self.session.execute(
            select(Timesheet)
            .where(Timesheet.client_id == client_id)
            .order_by(Timesheet.month.desc(), Timesheet.created_at.desc())
        )
        return list(result.scalars().all())
