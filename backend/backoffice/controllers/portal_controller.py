"""
Client portal controller.
Every operation is scoped to the client named in a verified portal token.
"""

from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.core.security import PortalTokenPayload
from backoffice.deps.di_container import Container, get_container
from backoffice.services.timesheet_approval_service import TimesheetApprovalService
from backoffice.services.timesheet_service import TimesheetService
from backoffice.schemas.portal import PortalResponse
from backoffice.schemas.timesheet import TimesheetApprovalResponse, TimesheetResponse


class PortalController(BaseController):
    """Controller for portal operations."""

    def __init__(self, session: AsyncSession, container: Optional[Container] = None):
        container = container or get_container()
        blob_client = container.blob_client()
        self.approval_service = TimesheetApprovalService(
            session,
            invoice_generator_client=container.invoice_generator_client(),
            blob_client=blob_client,
        )
        self.timesheet_service = TimesheetService(
            session,
            toggl_client=container.toggl_client(),
            blob_client=blob_client,
        )

    async def get_portal(self, token: PortalTokenPayload) -> PortalResponse:
        return await self.approval_service.get_portal(token)

    async def approve_timesheet(self, timesheet_id: UUID, token: PortalTokenPayload) -> TimesheetApprovalResponse:
        return await self.approval_service.approve_timesheet(timesheet_id, token)

    async def reject_timesheet(self, timesheet_id: UUID, token: PortalTokenPayload) -> TimesheetResponse:
        return await self.approval_service.reject_timesheet(timesheet_id, token)

    async def get_timesheet_pdf(self, timesheet_id: UUID, token: PortalTokenPayload) -> Tuple[bytes, str]:
        timesheet = await self.approval_service.get_owned_timesheet(timesheet_id, token)
        pdf = await self.timesheet_service.get_timesheet_pdf(timesheet)
        return pdf, f"{timesheet.month}.pdf"
