"""
Portal approval tests, including invoice fail-open behaviour.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backoffice.core.exceptions import (
    AlreadyApprovedError,
    AlreadyRejectedError,
    CannotApproveRejectedError,
    CannotRejectApprovedError,
    ForbiddenError,
    NotFoundError,
)
from backoffice.core.integrations.azure.blob_client import AzureBlobClient
from backoffice.core.security import PortalTokenPayload
from backoffice.db.repositories.invoice_repository import InvoiceRepository
from backoffice.db.repositories.setting_repository import SettingRepository
from backoffice.db.repositories.timesheet_repository import TimesheetRepository
from backoffice.models.invoice import InvoiceStatus
from backoffice.models.timesheet import TimesheetStatus
from backoffice.schemas.settings import BusinessProfileUpdate
from backoffice.services.settings_service import SettingsService
from backoffice.services.timesheet_approval_service import TimesheetApprovalService


def token_for(client_id) -> PortalTokenPayload:
    now = datetime.now(tz=timezone.utc)
    return PortalTokenPayload(client_id=client_id, issued_at=now, expires_at=now + timedelta(days=45))


@pytest.fixture
def service(test_db_session, fake_invoice_generator, fake_blob):
    return TimesheetApprovalService(test_db_session, fake_invoice_generator, fake_blob)


@pytest.fixture
async def billing_configured(test_db_session):
    settings_service = SettingsService(test_db_session)
    await settings_service.set_hourly_rate(100)
    await settings_service.set_business_profile(BusinessProfileUpdate(name="Jane Dev Ltd"))


@pytest.mark.asyncio
async def test_approve_creates_draft_invoice(service, make_client, make_timesheet, billing_configured, fake_blob):
    client = await make_client()
    timesheet = await make_timesheet(client.id, total_hours=Decimal("40.00"), invoice_number=1001)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED
    assert result.timesheet.approved_at is not None
    assert result.invoice_error is None
    assert result.invoice.amount == 4000.0
    assert result.invoice.invoice_number == "1001"
    assert result.invoice.status == InvoiceStatus.DRAFT
    assert f"invoices/{client.id}/1001.pdf" in fake_blob.blobs


@pytest.mark.asyncio
async def test_approve_sent_timesheet(service, make_client, make_timesheet, billing_configured):
    client = await make_client()
    timesheet = await make_timesheet(client.id, status=TimesheetStatus.SENT)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED


@pytest.mark.asyncio
async def test_approval_survives_missing_hourly_rate(service, make_client, make_timesheet, test_db_session):
    client = await make_client()
    timesheet = await make_timesheet(client.id)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED
    assert result.invoice is None
    assert result.invoice_error == "Hourly rate not configured"

    stored = await TimesheetRepository(test_db_session).get(timesheet.id)
    assert stored.status == TimesheetStatus.APPROVED
    assert await InvoiceRepository(test_db_session).get_by_timesheet(timesheet.id) is None


@pytest.mark.asyncio
async def test_approval_survives_renderer_failure(
    service, make_client, make_timesheet, billing_configured, fake_invoice_generator, test_db_session
):
    client = await make_client()
    timesheet = await make_timesheet(client.id)
    fake_invoice_generator.fail = True

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.invoice is None
    assert result.invoice_error == "Invoice generator API error: 500 - render failed"
    stored = await TimesheetRepository(test_db_session).get(timesheet.id)
    assert stored.status == TimesheetStatus.APPROVED


@pytest.mark.asyncio
async def test_approval_survives_missing_invoice_number(service, make_client, make_timesheet, billing_configured):
    client = await make_client()
    timesheet = await make_timesheet(client.id, invoice_number=None)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED
    assert result.invoice_error == "Timesheet has no invoice number"


class ExplodingBlobClient:
    """Blob client whose upload fails with an error outside the app hierarchy."""

    async def upload_pdf(self, data, blob_path):
        raise RuntimeError("socket closed mid-upload")


@pytest.mark.asyncio
async def test_approval_survives_unexpected_invoicing_error(
    make_client, make_timesheet, billing_configured, fake_invoice_generator, test_db_session
):
    client = await make_client()
    timesheet = await make_timesheet(client.id)
    service = TimesheetApprovalService(test_db_session, fake_invoice_generator, ExplodingBlobClient())

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED
    assert result.invoice is None
    assert result.invoice_error == "Invoice generation failed"
    stored = await TimesheetRepository(test_db_session).get(timesheet.id)
    assert stored.status == TimesheetStatus.APPROVED
    assert await InvoiceRepository(test_db_session).get_by_timesheet(timesheet.id) is None


@pytest.mark.asyncio
async def test_approval_survives_malformed_storage_connection_string(
    make_client, make_timesheet, billing_configured, fake_invoice_generator, test_db_session
):
    client = await make_client()
    timesheet = await make_timesheet(client.id)
    blob_client = AzureBlobClient(connection_string="garbage", container_name="pdfs")
    service = TimesheetApprovalService(test_db_session, fake_invoice_generator, blob_client)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.invoice is None
    assert result.invoice_error.startswith("AZURE_STORAGE_CONNECTION_STRING is malformed")
    stored = await TimesheetRepository(test_db_session).get(timesheet.id)
    assert stored.status == TimesheetStatus.APPROVED


@pytest.mark.asyncio
async def test_approval_survives_unusable_stored_rate(service, make_client, make_timesheet, test_db_session):
    await SettingRepository(test_db_session).upsert("hourlyRate", {"rate": float("inf")})
    await test_db_session.commit()
    client = await make_client()
    timesheet = await make_timesheet(client.id)

    result = await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert result.timesheet.status == TimesheetStatus.APPROVED
    assert result.invoice_error == "Hourly rate not configured"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error",
    [
        (TimesheetStatus.APPROVED, AlreadyApprovedError),
        (TimesheetStatus.REJECTED, CannotApproveRejectedError),
    ],
)
async def test_approve_rejects_final_states(service, make_client, make_timesheet, status, error, fake_invoice_generator):
    client = await make_client()
    timesheet = await make_timesheet(client.id, status=status)

    with pytest.raises(error):
        await service.approve_timesheet(timesheet.id, token_for(client.id))

    assert fake_invoice_generator.payloads == []


@pytest.mark.asyncio
async def test_other_clients_token_is_forbidden(service, make_client, make_timesheet):
    owner = await make_client()
    other = await make_client(name="Globex")
    timesheet = await make_timesheet(owner.id)

    with pytest.raises(ForbiddenError) as exc_info:
        await service.approve_timesheet(timesheet.id, token_for(other.id))

    assert exc_info.value.message == "Not authorized to approve this timesheet"


@pytest.mark.asyncio
async def test_unknown_timesheet(service, make_client):
    client = await make_client()

    with pytest.raises(NotFoundError):
        await service.reject_timesheet(uuid.uuid4(), token_for(client.id))


@pytest.mark.asyncio
async def test_reject_pending_timesheet(service, make_client, make_timesheet):
    client = await make_client()
    timesheet = await make_timesheet(client.id)

    result = await service.reject_timesheet(timesheet.id, token_for(client.id))

    assert result.status == TimesheetStatus.REJECTED
    assert result.rejected_at is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error",
    [
        (TimesheetStatus.REJECTED, AlreadyRejectedError),
        (TimesheetStatus.APPROVED, CannotRejectApprovedError),
    ],
)
async def test_reject_rejects_final_states(service, make_client, make_timesheet, status, error):
    client = await make_client()
    timesheet = await make_timesheet(client.id, status=status)

    with pytest.raises(error):
        await service.reject_timesheet(timesheet.id, token_for(client.id))


@pytest.mark.asyncio
async def test_portal_lists_only_own_timesheets(service, make_client, make_timesheet):
    client = await make_client()
    other = await make_client(name="Globex")
    await make_timesheet(client.id, month="2026-08", pdf_url="https://blob.test/pdfs/x.pdf")
    await make_timesheet(client.id, month="2026-09")
    await make_timesheet(other.id, month="2026-09")
    token = token_for(client.id)

    portal = await service.get_portal(token)

    assert portal.client.name == "Acme Corp"
    assert [t.month for t in portal.timesheets] == ["2026-09", "2026-08"]
    assert [t.has_pdf for t in portal.timesheets] == [False, True]
    assert portal.token_expires_at == token.expires_at
