"""
Invoice service.
Prices approved hours, renders the invoice through invoice-generator.com and stores the PDF.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.config import settings
from backoffice.core.exceptions import InvoiceGenerationError, NotFoundError, ValidationError
from backoffice.core.integrations.azure.blob_client import AzureBlobClient, invoice_blob_path
from backoffice.core.integrations.invoice_generator.invoice_generator_client import InvoiceGeneratorClient
from backoffice.db.repositories.invoice_repository import InvoiceRepository
from backoffice.models.invoice import Invoice, InvoiceStatus
from backoffice.schemas.invoice import InvoiceResponse
from backoffice.schemas.settings import BusinessProfileResponse
from backoffice.services.base_service import BaseService
from backoffice.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class InvoiceClient:
    id: UUID
    name: str


@dataclass
class InvoiceData:
    """What is being billed."""
    invoice_number: str
    month: str  # YYYY-MM
    total_hours: Decimal
    client: InvoiceClient


@dataclass
class GeneratedInvoice:
    invoice_number: str
    amount: Decimal
    pdf_url: str
    blob_path: str


def calculate_amount(total_hours: Decimal, hourly_rate: Decimal) -> Decimal:
    """Hours times rate, rounded half-up to cents."""
    return (Decimal(str(total_hours)) * Decimal(str(hourly_rate))).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_invoice_date(value: date) -> str:
    """e.g. ``27 01 2026``"""
    return value.strftime("%d %m %Y")


def format_month_display(month: str) -> str:
    """``2026-01`` -> ``January 2026``"""
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def build_from_field(profile: BusinessProfileResponse) -> str:
    parts = [
        profile.name,
        f"Business Number: {profile.business_number}" if profile.business_number else None,
        f"GST Number: {profile.gst_number}" if profile.gst_number else None,
        profile.phone,
        profile.email,
        profile.address,
    ]
    return "\n".join(part for part in parts if part)


def build_invoice_payload(
    data: InvoiceData,
    profile: BusinessProfileResponse,
    amount: Decimal,
    invoice_date: date,
) -> Dict[str, Any]:
    """Build the invoice-generator.com request body."""
    due_date = invoice_date + timedelta(days=profile.payment_terms_days)
    payload: Dict[str, Any] = {
        "from": build_from_field(profile),
        "to": data.client.name,
        "number": data.invoice_number,
        "date": format_invoice_date(invoice_date),
        "due_date": format_invoice_date(due_date),
        "items": [
            {
                "name": f"{settings.INVOICE_LINE_ITEM_LABEL} for {format_month_display(data.month)}",
                "quantity": 1,
                "unit_cost": float(amount),
            }
        ],
    }

    if profile.tax_rate:
        payload["fields"] = {"tax": "%"}
        payload["tax"] = profile.tax_rate

    if profile.payment_terms_days:
        payload["terms"] = f"Payment due within {profile.payment_terms_days} days"

    if profile.payment_details:
        payload["notes_title"] = "Payment Details"
        payload["notes"] = profile.payment_details

    return payload


class InvoiceService(BaseService):
    """Service for invoice generation and listing."""

    def __init__(
        self,
        session: AsyncSession,
        invoice_generator_client: InvoiceGeneratorClient,
        blob_client: AzureBlobClient,
    ):
        self.session = session
        self.invoice_generator_client = invoice_generator_client
        self.blob_client = blob_client
        self.invoice_repo = InvoiceRepository(session)
        self.settings_service = SettingsService(session)

    async def generate_invoice(
        self,
        data: InvoiceData,
        invoice_date: Optional[date] = None,
    ) -> GeneratedInvoice:
        """
        Render and store an invoice PDF.

        Raises:
            InvoiceGenerationError: Hourly rate is unset or not positive, or business name is not configured
            UpstreamServiceError: The renderer or blob storage failed
        """
        rate = await self.settings_service.get_hourly_rate_decimal()
        if rate is None:
            raise InvoiceGenerationError("Hourly rate not configured")
        if rate <= 0:
            raise InvoiceGenerationError("Hourly rate must be greater than zero")

        profile = await self.settings_service.get_business_profile()
        if not profile.name:
            raise InvoiceGenerationError("Business name not configured")

        amount = calculate_amount(data.total_hours, rate)
        invoice_date = invoice_date or datetime.now(tz=timezone.utc).date()
        payload = build_invoice_payload(data, profile, amount, invoice_date)

        pdf = await self.invoice_generator_client.generate_pdf(payload)

        blob_path = invoice_blob_path(data.client.id, data.invoice_number)
        upload = await self.blob_client.upload_pdf(pdf, blob_path)

        logger.info(
            "Invoice generated",
            extra={"invoice_number": data.invoice_number, "amount": str(amount)},
        )
        return GeneratedInvoice(
            invoice_number=data.invoice_number,
            amount=amount,
            pdf_url=upload.url,
            blob_path=blob_path,
        )

    async def create_invoice_record(
        self,
        generated: GeneratedInvoice,
        client_id: UUID,
        timesheet_id: UUID,
        month: str,
    ) -> Invoice:
        """Persist a generated invoice as a draft."""
        return await self.invoice_repo.create(
            client_id=client_id,
            timesheet_id=timesheet_id,
            invoice_number=generated.invoice_number,
            month=month,
            amount=generated.amount,
            status=InvoiceStatus.DRAFT,
            pdf_url=generated.pdf_url,
        )

    async def list_invoices(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[InvoiceResponse], int]:
        """List invoices newest first, optionally filtered by client and status."""
        status_enum = None
        if status:
            try:
                status_enum = InvoiceStatus(status)
            except ValueError:
                valid = ", ".join(s.value for s in InvoiceStatus)
                raise ValidationError(f"Invalid status. Must be one of: {valid}")

        invoices = await self.invoice_repo.list(limit=1000, client_id=client_id, status=status_enum)
        return [InvoiceResponse.model_validate(i) for i in invoices], len(invoices)

    async def get_invoice_pdf(self, invoice_id: UUID) -> Tuple[bytes, str]:
        """
        Download a stored invoice PDF.

        Returns:
            PDF bytes and a download file name
        """
        invoice = await self.invoice_repo.get(invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found")
        if not invoice.pdf_url:
            raise NotFoundError("No PDF available for this invoice")

        pdf = await self.blob_client.download_pdf(invoice_blob_path(invoice.client_id, invoice.invoice_number))
        return pdf, f"invoice-{invoice.invoice_number}.pdf"
