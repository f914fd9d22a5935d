"""
Timesheet Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from backoffice.models.timesheet import TimesheetStatus
from backoffice.schemas.invoice import InvoiceResponse


class TimesheetCreate(BaseModel):
    """Request to generate a timesheet from tracked hours."""
    client_id: UUID
    month: str
    force: bool = False


class TimesheetResponse(BaseModel):
    id: UUID
    client_id: UUID
    month: str
    status: TimesheetStatus
    pdf_url: Optional[str] = None
    total_hours: float
    invoice_number: Optional[int] = None
    sent_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TimesheetListResponse(BaseModel):
    items: List[TimesheetResponse]
    total: int


class TimesheetSummary(BaseModel):
    """Totals pulled from the time tracker."""
    total_hours: float
    entry_count: int


class TimesheetCreateResponse(BaseModel):
    timesheet: TimesheetResponse
    summary: TimesheetSummary


class ExistingTimesheet(BaseModel):
    id: UUID
    status: TimesheetStatus
    total_hours: float
    created_at: datetime

    class Config:
        from_attributes = True


class TimesheetCheckResponse(BaseModel):
    """Whether a timesheet already exists for a client and month."""
    exists: bool
    timesheet: Optional[ExistingTimesheet] = None


class TimesheetApprovalResponse(BaseModel):
    """
    Result of an approval.
    The approval stands even when invoice generation failed; see invoice_error.
    """
    timesheet: TimesheetResponse
    invoice: Optional[InvoiceResponse] = None
    invoice_error: Optional[str] = None
