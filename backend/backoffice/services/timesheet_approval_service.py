"""
Timesheet approval service - client-side approve and reject through the portal.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.exceptions import (
    AlreadyApprovedError,
    AlreadyRejectedError,
    AppException,
    CannotApproveRejectedError,
    CannotRejectApprovedError,
    ForbiddenError,
    InvoiceGenerationError,
    NotFoundError,
)
from backoffice.core.integrations.azure.blob_client import AzureBlobClient
from backoffice.core.integrations.invoice_generator.invoice_generator_client import InvoiceGeneratorClient
from backoffice.core.security import PortalTokenPayload
from backoffice.db.repositories.client_repository import ClientRepository
from backoffice.db.repositories.timesheet_repository import TimesheetRepository
from backoffice.models.client import Client
from backoffice.models.invoice import Invoice
from backoffice.models.timesheet import Timesheet, TimesheetStatus
from backoffice.schemas.invoice import InvoiceResponse
from backoffice.schemas.portal import PortalClient, PortalResponse, PortalTimesheet
from backoffice.schemas.timesheet import TimesheetApprovalResponse, TimesheetResponse
from backoffice.services.base_service import BaseService
from backoffice.services.invoice_service import InvoiceClient, InvoiceData, InvoiceService

logger = logging.getLogger(__name__)


class TimesheetApprovalService(BaseService):
    """Service for timesheet approval operations."""

    def __init__(
        self,
        session: AsyncSession,
        invoice_generator_client: InvoiceGeneratorClient,
        blob_client: AzureBlobClient,
    ):
        self.session = session
        self.timesheet_repo = TimesheetRepository(session)
        self.client_repo = ClientRepository(session)
        self.invoice_service = InvoiceService(session, invoice_generator_client, blob_client)

    async def _get_client_or_404(self, client_id: UUID) -> Client:
        client = await self.client_repo.get(client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    async def get_owned_timesheet(self, timesheet_id: UUID, token: PortalTokenPayload, action: str = "access") -> Timesheet:
        """
        Load a timesheet the token's client owns.

        Raises:
            NotFoundError: Unknown timesheet
            ForbiddenError: The timesheet belongs to another client
        """
        timesheet = await self.timesheet_repo.get(timesheet_id)
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        if timesheet.client_id != token.client_id:
            raise ForbiddenError(f"Not authorized to {action} this timesheet")
        return timesheet

    async def get_portal(self, token: PortalTokenPayload) -> PortalResponse:
        """The token's client and all of its timesheets."""
        client = await self._get_client_or_404(token.client_id)
        timesheets = await self.timesheet_repo.list_by_client(client.id)
        return PortalResponse(
            client=PortalClient.model_validate(client),
            timesheets=[
                PortalTimesheet(
                    id=t.id,
                    month=t.month,
                    status=t.status,
                    total_hours=t.total_hours,
                    has_pdf=bool(t.pdf_url),
                    sent_at=t.sent_at,
                    approved_at=t.approved_at,
                    rejected_at=t.rejected_at,
                    created_at=t.created_at,
                )
                for t in timesheets
            ],
            token_expires_at=token.expires_at,
        )

    async def approve_timesheet(self, timesheet_id: UUID, token: PortalTokenPayload) -> TimesheetApprovalResponse:
        """
        Approve a pending or sent timesheet, then try to invoice it.

        The approval is committed before invoicing starts. Invoice failures are
        logged and reported in ``invoice_error`` without undoing the approval.
        """
        timesheet = await self.get_owned_timesheet(timesheet_id, token, action="approve")

        if timesheet.status == TimesheetStatus.APPROVED:
            raise AlreadyApprovedError()
        if timesheet.status == TimesheetStatus.REJECTED:
            raise CannotApproveRejectedError()

        timesheet = await self.timesheet_repo.update(
            timesheet,
            status=TimesheetStatus.APPROVED,
            approved_at=datetime.now(tz=timezone.utc),
        )
        await self.session.commit()
        logger.info("Timesheet approved", extra={"timesheet_id": str(timesheet.id)})
        # Snapshot before invoicing; a rollback there expires the instance
        approved = TimesheetResponse.model_validate(timesheet)

        invoice, invoice_error = await self._try_generate_invoice(timesheet)

        return TimesheetApprovalResponse(
            timesheet=approved,
            invoice=InvoiceResponse.model_validate(invoice) if invoice else None,
            invoice_error=invoice_error,
        )

    async def _try_generate_invoice(self, timesheet: Timesheet) -> Tuple[Optional[Invoice], Optional[str]]:
        timesheet_id = timesheet.id
        try:
            invoice = await self._generate_invoice(timesheet)
            await self.session.commit()
        except AppException as e:
            await self.session.rollback()
            logger.error(
                f"Invoice generation failed: {e.message}",
                extra={"timesheet_id": str(timesheet_id)},
            )
            return None, e.message
        except Exception:
            # The approval is already committed; no invoice failure may surface as a 500
            await self.session.rollback()
            logger.exception(
                "Invoice generation failed unexpectedly",
                extra={"timesheet_id": str(timesheet_id)},
            )
            return None, "Invoice generation failed"
        return invoice, None

    async def _generate_invoice(self, timesheet: Timesheet) -> Invoice:
        if timesheet.invoice_number is None:
            raise InvoiceGenerationError("Timesheet has no invoice number")

        client = await self.client_repo.get(timesheet.client_id)
        if not client:
            raise InvoiceGenerationError("Client not found for timesheet")

        generated = await self.invoice_service.generate_invoice(
            InvoiceData(
                invoice_number=str(timesheet.invoice_number),
                month=timesheet.month,
                total_hours=Decimal(str(timesheet.total_hours)),
                client=InvoiceClient(id=client.id, name=client.name),
            )
        )
        return await self.invoice_service.create_invoice_record(
            generated,
            client_id=client.id,
            timesheet_id=timesheet.id,
            month=timesheet.month,
        )

    async def reject_timesheet(self, timesheet_id: UUID, token: PortalTokenPayload) -> TimesheetResponse:
        """
        Reject a pending or sent timesheet.

        Raises:
            AlreadyRejectedError: Already rejected
            CannotRejectApprovedError: Already approved
        """
        timesheet = await self.get_owned_timesheet(timesheet_id, token, action="reject")

        if timesheet.status == TimesheetStatus.REJECTED:
            raise AlreadyRejectedError()
        if timesheet.status == TimesheetStatus.APPROVED:
            raise CannotRejectApprovedError()

        updated = await self.timesheet_repo.update(
            timesheet,
            status=TimesheetStatus.REJECTED,
            rejected_at=datetime.now(tz=timezone.utc),
        )
        await self.session.commit()
        logger.info("Timesheet rejected", extra={"timesheet_id": str(timesheet_id)})
        return TimesheetResponse.model_validate(updated)

