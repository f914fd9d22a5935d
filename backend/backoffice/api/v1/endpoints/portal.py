"""
Client portal endpoints.
Authenticated only by the portal token in the path, and rate limited per address.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from backoffice.api.v1.endpoints.timesheets import pdf_response
from backoffice.api.v1.middleware import get_portal_token
from backoffice.controllers.portal_controller import PortalController
from backoffice.core.config import settings
from backoffice.core.rate_limit import limiter
from backoffice.core.security import PortalTokenPayload
from backoffice.db.session import get_db
from backoffice.schemas.portal import PortalResponse
from backoffice.schemas.timesheet import TimesheetApprovalResponse, TimesheetResponse

router = APIRouter()


@router.get("/{token}", response_model=PortalResponse)
@limiter.limit(settings.PORTAL_RATE_LIMIT)
async def get_portal(
    request: Request,
    payload: PortalTokenPayload = Depends(get_portal_token),
    db: AsyncSession = Depends(get_db),
) -> PortalResponse:
    """The token's client and its timesheets."""
    return await PortalController(db).get_portal(payload)


@router.post("/{token}/timesheets/{timesheet_id}/approve", response_model=TimesheetApprovalResponse)
@limiter.limit(settings.PORTAL_RATE_LIMIT)
async def approve_timesheet(
    request: Request,
    timesheet_id: UUID,
    payload: PortalTokenPayload = Depends(get_portal_token),
    db: AsyncSession = Depends(get_db),
) -> TimesheetApprovalResponse:
    """
    Approve a timesheet and generate its invoice.
    Invoice failures are reported in invoice_error; the approval still stands.
    """
    return await PortalController(db).approve_timesheet(timesheet_id, payload)


@router.post("/{token}/timesheets/{timesheet_id}/reject", response_model=TimesheetResponse)
@limiter.limit(settings.PORTAL_RATE_LIMIT)
async def reject_timesheet(
    request: Request,
    timesheet_id: UUID,
    payload: PortalTokenPayload = Depends(get_portal_token),
    db: AsyncSession = Depends(get_db),
) -> TimesheetResponse:
    return await PortalController(db).reject_timesheet(timesheet_id, payload)


@router.get("/{token}/timesheets/{timesheet_id}/pdf")
@limiter.limit(settings.PORTAL_RATE_LIMIT)
async def get_timesheet_pdf(
    request: Request,
    timesheet_id: UUID,
    payload: PortalTokenPayload = Depends(get_portal_token),
    db: AsyncSession = Depends(get_db),
) -> Response:
    pdf, filename = await PortalController(db).get_timesheet_pdf(timesheet_id, payload)
    return pdf_response(pdf, filename)
