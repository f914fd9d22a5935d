"""
Client portal response schemas.
Only what a client needs to review its own timesheets.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from backoffice.models.timesheet import TimesheetStatus


class PortalClient(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class PortalTimesheet(BaseModel):
    id: UUID
    month: str
    status: TimesheetStatus
    total_hours: float
    has_pdf: bool = False
    sent_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    created_at: datetime


class PortalResponse(BaseModel):
    client: PortalClient
    timesheets: List[PortalTimesheet]
    token_expires_at: datetime
