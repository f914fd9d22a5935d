"""
Timesheet API endpoints (admin).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from backoffice.db.session import get_db
from backoffice.controllers.timesheet_controller import TimesheetController
from backoffice.schemas.timesheet import (
    TimesheetCheckResponse,
    TimesheetCreate,
    TimesheetCreateResponse,
    TimesheetListResponse,
    TimesheetResponse,
)

router = APIRouter()


def pdf_response(pdf: bytes, filename: str) -> Response:
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("", response_model=TimesheetCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_timesheet(
    data: TimesheetCreate,
    db: AsyncSession = Depends(get_db),
) -> TimesheetCreateResponse:
    """Generate a timesheet from Toggl hours. Set force to replace an existing one."""
    controller = TimesheetController(db)
    return await controller.create_timesheet(data)


@router.get("", response_model=TimesheetListResponse)
async def list_timesheets(
    client_id: Optional[UUID] = Query(None),
    status: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> TimesheetListResponse:
    """List timesheets with optional filters."""
    controller = TimesheetController(db)
    return await controller.list_timesheets(client_id=client_id, status=status)


@router.get("/check", response_model=TimesheetCheckResponse)
async def check_timesheet(
    client_id: UUID = Query(...),
    month: str = Query(...),
    db: AsyncSession = Depends(get_db),
) -> TimesheetCheckResponse:
    """Check whether a timesheet exists for a client and month."""
    controller = TimesheetController(db)
    return await controller.check_timesheet(client_id, month)


@router.get("/{timesheet_id}", response_model=TimesheetResponse)
async def get_timesheet(
    timesheet_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> TimesheetResponse:
    controller = TimesheetController(db)
    return await controller.get_timesheet(timesheet_id)


@router.post("/{timesheet_id}/mark-sent", response_model=TimesheetResponse)
async def mark_sent(
    timesheet_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> TimesheetResponse:
    """Record that a pending timesheet was sent to the client."""
    controller = TimesheetController(db)
    return await controller.mark_sent(timesheet_id)


@router.get("/{timesheet_id}/pdf")
async def get_timesheet_pdf(
    timesheet_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Stream the stored timesheet PDF."""
    controller = TimesheetController(db)
    pdf, filename = await controller.get_timesheet_pdf(timesheet_id)
    return pdf_response(pdf, filename)
