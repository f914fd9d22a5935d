"""
Timesheet controller (admin side).
"""

from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.deps.di_container import Container, get_container
from backoffice.services.timesheet_service import TimesheetService
from backoffice.schemas.timesheet import (
    TimesheetCheckResponse,
    TimesheetCreate,
    TimesheetCreateResponse,
    TimesheetListResponse,
    TimesheetResponse,
)


class TimesheetController(BaseController):
    """Controller for timesheet operations."""

    def __init__(self, session: AsyncSession, container: Optional[Container] = None):
        container = container or get_container()
        self.timesheet_service = TimesheetService(
            session,
            toggl_client=container.toggl_client(),
            blob_client=container.blob_client(),
        )

    async def create_timesheet(self, data: TimesheetCreate) -> TimesheetCreateResponse:
        return await self.timesheet_service.create_timesheet(data.client_id, data.month, force=data.force)

    async def check_timesheet(self, client_id: UUID, month: str) -> TimesheetCheckResponse:
        return await self.timesheet_service.check_timesheet(client_id, month)

    async def list_timesheets(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> TimesheetListResponse:
        timesheets, total = await self.timesheet_service.list_timesheets(client_id=client_id, status=status)
        return TimesheetListResponse(items=timesheets, total=total)

    async def get_timesheet(self, timesheet_id: UUID) -> TimesheetResponse:
        return await self.timesheet_service.get_timesheet(timesheet_id)

    async def mark_sent(self, timesheet_id: UUID) -> TimesheetResponse:
        return await self.timesheet_service.mark_sent(timesheet_id)

    async def get_timesheet_pdf(self, timesheet_id: UUID) -> Tuple[bytes, str]:
        """PDF bytes and file name for a timesheet."""
        timesheet = await self.timesheet_service.get_timesheet_model(timesheet_id)
        pdf = await self.timesheet_service.get_timesheet_pdf(timesheet)
        return pdf, f"{timesheet.month}.pdf"
