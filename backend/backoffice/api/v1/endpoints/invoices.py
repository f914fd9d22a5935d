"""
Invoice API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from backoffice.db.session import get_db
from backoffice.controllers.invoice_controller import InvoiceController
from backoffice.schemas.invoice import InvoiceListResponse
from backoffice.api.v1.endpoints.timesheets import pdf_response

router = APIRouter()


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    client_id: Optional[UUID] = Query(None),
    status: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> InvoiceListResponse:
    """List invoices, newest first."""
    controller = InvoiceController(db)
    return await controller.list_invoices(client_id=client_id, status=status)


@router.get("/{invoice_id}/pdf")
async def get_invoice_pdf(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Stream the stored invoice PDF."""
    controller = InvoiceController(db)
    pdf, filename = await controller.get_invoice_pdf(invoice_id)
    return pdf_response(pdf, filename)
