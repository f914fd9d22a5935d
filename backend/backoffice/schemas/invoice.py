"""
Invoice Pydantic schemas.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from backoffice.models.invoice import InvoiceStatus


class InvoiceResponse(BaseModel):
    id: UUID
    client_id: UUID
    timesheet_id: Optional[UUID] = None
    invoice_number: str
    month: str
    amount: float
    status: InvoiceStatus
    pdf_url: Optional[str] = None
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceListResponse(BaseModel):
    items: List[InvoiceResponse]
    total: int
