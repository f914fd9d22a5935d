"""
Timesheet service.
Generates monthly timesheets from Toggl hours and manages their admin-side lifecycle.
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.exceptions import (
    AppException,
    ConflictError,
    InvalidStateTransitionError,
    NotConfiguredError,
    NotFoundError,
    ValidationError,
)
from backoffice.core.integrations.azure.blob_client import AzureBlobClient, timesheet_blob_path
from backoffice.core.integrations.toggl.toggl_client import TogglClient
from backoffice.db.repositories.client_repository import ClientRepository
from backoffice.db.repositories.timesheet_repository import TimesheetRepository
from backoffice.models.client import Client
from backoffice.models.timesheet import Timesheet, TimesheetStatus
from backoffice.schemas.timesheet import (
    ExistingTimesheet,
    TimesheetCheckResponse,
    TimesheetCreateResponse,
    TimesheetResponse,
    TimesheetSummary,
)
from backoffice.services.base_service import BaseService
from backoffice.services.client_service import ClientService
from backoffice.services.settings_service import SettingsService
from backoffice.utils.validation import is_valid_month

logger = logging.getLogger(__name__)


def validate_month(month: str) -> None:
    if not is_valid_month(month):
        raise ValidationError("month must be in YYYY-MM format")


class TimesheetService(BaseService):
    """Service for timesheet creation and admin operations."""

    def __init__(
        self,
        session: AsyncSession,
        toggl_client: TogglClient,
        blob_client: AzureBlobClient,
    ):
        self.session = session
        self.toggl_client = toggl_client
        self.blob_client = blob_client
        self.timesheet_repo = TimesheetRepository(session)
        self.client_repo = ClientRepository(session)
        self.client_service = ClientService(session)
        self.settings_service = SettingsService(session)

    async def _get_client_or_404(self, client_id: UUID) -> Client:
        client = await self.client_repo.get(client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    async def get_timesheet_model(self, timesheet_id: UUID) -> Timesheet:
        timesheet = await self.timesheet_repo.get(timesheet_id)
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        return timesheet

    async def _replace_existing(self, existing: Timesheet) -> None:
        """Remove a timesheet being regenerated, PDF first."""
        if existing.pdf_url:
            await self.blob_client.delete_pdf(timesheet_blob_path(existing.client_id, existing.month))
        await self.timesheet_repo.delete(existing.id)
        logger.info(
            "Replaced existing timesheet",
            extra={"timesheet_id": str(existing.id), "month": existing.month},
        )

    async def _store_timesheet_pdf(self, client: Client, month: str) -> Optional[str]:
        """Fetch the Toggl report and upload it. Failures leave the timesheet without a PDF."""
        try:
            pdf = await self.toggl_client.fetch_timesheet_pdf(client.toggl_project_id, month)
            result = await self.blob_client.upload_pdf(pdf, timesheet_blob_path(client.id, month))
        except (AppException, ValueError) as e:
            logger.warning(
                f"Failed to fetch/upload timesheet PDF: {e}",
                extra={"client_id": str(client.id), "month": month},
            )
            return None
        return result.url

    async def create_timesheet(
        self,
        client_id: UUID,
        month: str,
        force: bool = False,
    ) -> TimesheetCreateResponse:
        """
        Create a timesheet for a client and month from tracked hours.

        Args:
            client_id: Client to bill
            month: Month in YYYY-MM format
            force: Replace an existing timesheet for the same month

        Raises:
            ValidationError: Bad month format
            NotFoundError: Unknown client
            NotConfiguredError: Client has no Toggl project
            ConflictError: A timesheet already exists and force is not set
            UpstreamServiceError: Toggl could not supply the hours
        """
        validate_month(month)
        client = await self._get_client_or_404(client_id)

        if not client.toggl_project_id:
            raise NotConfiguredError("Client does not have a Toggl project ID configured")

        existing = await self.timesheet_repo.get_by_client_and_month(client_id, month)
        if existing and not force:
            raise ConflictError(
                f"A timesheet already exists for {client.name} in {month}",
                details={"existing_timesheet_id": str(existing.id)},
            )

        # Hours first, so an unreachable Toggl leaves any existing timesheet untouched
        summary = await self.toggl_client.fetch_time_entries(client.toggl_project_id, month)

        invoice_number: Optional[int] = None
        if existing:
            invoice_number = existing.invoice_number
            await self._replace_existing(existing)
        if invoice_number is None:
            invoice_number = await self.settings_service.get_and_increment_next_invoice_number()

        pdf_url = await self._store_timesheet_pdf(client, month)

        timesheet = await self.timesheet_repo.create(
            client_id=client.id,
            month=month,
            status=TimesheetStatus.PENDING,
            pdf_url=pdf_url,
            total_hours=summary.total_hours,
            invoice_number=invoice_number,
        )
        await self.client_service.refresh_portal_token(client)
        await self.session.commit()

        logger.info(
            "Timesheet created",
            extra={
                "timesheet_id": str(timesheet.id),
                "client_id": str(client.id),
                "month": month,
                "invoice_number": invoice_number,
            },
        )
        return TimesheetCreateResponse(
            timesheet=TimesheetResponse.model_validate(timesheet),
            summary=TimesheetSummary(
                total_hours=summary.total_hours,
                entry_count=len(summary.entries),
            ),
        )

    async def check_timesheet(self, client_id: UUID, month: str) -> TimesheetCheckResponse:
        """Report whether a timesheet exists for a client and month."""
        validate_month(month)
        await self._get_client_or_404(client_id)

        existing = await self.timesheet_repo.get_by_client_and_month(client_id, month)
        return TimesheetCheckResponse(
            exists=existing is not None,
            timesheet=ExistingTimesheet.model_validate(existing) if existing else None,
        )

    async def list_timesheets(
        self,
        client_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[TimesheetResponse], int]:
        """List timesheets newest first, optionally filtered."""
        status_enum = None
        if status:
            try:
                status_enum = TimesheetStatus(status)
            except ValueError:
                valid = ", ".join(s.value for s in TimesheetStatus)
                raise ValidationError(f"Invalid status. Must be one of: {valid}")

        timesheets = await self.timesheet_repo.list(limit=1000, client_id=client_id, status=status_enum)
        return [TimesheetResponse.model_validate(t) for t in timesheets], len(timesheets)

    async def get_timesheet(self, timesheet_id: UUID) -> TimesheetResponse:
        return TimesheetResponse.model_validate(await self.get_timesheet_model(timesheet_id))

    async def mark_sent(self, timesheet_id: UUID) -> TimesheetResponse:
        """
        Record that a pending timesheet was sent to the client.

        Raises:
            InvalidStateTransitionError: The timesheet is not pending
        """
        timesheet = await self.get_timesheet_model(timesheet_id)
        if timesheet.status != TimesheetStatus.PENDING:
            raise InvalidStateTransitionError(
                f"Cannot mark a {timesheet.status.value} timesheet as sent"
            )

        updated = await self.timesheet_repo.update(
            timesheet,
            status=TimesheetStatus.SENT,
            sent_at=datetime.now(tz=timezone.utc),
        )
        await self.session.commit()
        logger.info("Timesheet marked sent", extra={"timesheet_id": str(timesheet_id)})
        return TimesheetResponse.model_validate(updated)

    async def get_timesheet_pdf(self, timesheet: Timesheet) -> bytes:
        """
        Download the stored PDF for a timesheet.

        Raises:
            NotFoundError: The timesheet has no PDF
        """
        if not timesheet.pdf_url:
            raise NotFoundError("No PDF available for this timesheet")
        return await self.blob_client.download_pdf(timesheet_blob_path(timesheet.client_id, timesheet.month))
