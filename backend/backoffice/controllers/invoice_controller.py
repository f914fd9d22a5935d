"""
Invoice controller.
"""

from typing import Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.controllers.base_controller import BaseController
from backoffice.deps.di_container import Container, get_container
from backoffice.services.invoice_service import InvoiceService
from backoffice.schemas.invoice import InvoiceListResponse


class InvoiceController(BaseController):
    """Controller for invoice operations."""

    def __init__(self, session: AsyncSession, container: Optional[Container] = None):
        container = container or get_container()
        self.invoice_service = InvoiceService(
            session,
            invoice_generator_client=container.invoice_generator_client(),
            blob_client=container.blob_client(),
        )

    async def list_invoices(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> InvoiceListResponse:
        invoices, total = await self.invoice_service.list_invoices(client_id=client_id, status=status)
        return InvoiceListResponse(items=invoices, total=total)

    async def get_invoice_pdf(self, invoice_id: UUID) -> Tuple[bytes, str]:
        return await self.invoice_service.get_invoice_pdf(invoice_id)
