"""
Pytest configuration and fixtures.
Provides an in-memory database, fake integrations wired through the DI container,
and an HTTP client against the app.
"""

from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.core.cache import MemoryCache
from backoffice.core.config import settings
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.core.integrations.azure.blob_client import UploadResult
from backoffice.core.integrations.toggl.toggl_client import (
    MonthToDateHours,
    TimeEntry,
    TimeEntrySummary,
    TogglClientRecord,
    seconds_to_hours,
)
from backoffice.core.rate_limit import limiter
from backoffice.db import session as db_session
from backoffice.db.base import Base
from backoffice.db.session import get_db
from backoffice.deps.di_container import get_container
from backoffice.main import app
from backoffice.models.client import Client
from backoffice.models.timesheet import Timesheet, TimesheetStatus

import backoffice.models  # noqa: F401


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key-for-portal-tokens"
PRINCIPAL_HEADERS = {"X-MS-CLIENT-PRINCIPAL": "dGVzdC1wcmluY2lwYWw="}


class FakeTogglClient:
    """In-memory stand-in for the Toggl API."""

    def __init__(self):
        self.hours_seconds = 40 * 3600
        self.entry_count = 3
        self.pdf = b"%PDF-timesheet"
        self.fail_entries = False
        self.fail_pdf = False
        self.fail_mtd = False
        self.mtd_hours = Decimal("12.50")
        self.mtd_calls = 0
        self.clients: List[TogglClientRecord] = []
        self.entry_requests: List[tuple] = []

    async def fetch_time_entries(self, project_id: str, month: str) -> TimeEntrySummary:
        self.entry_requests.append((project_id, month))
        if self.fail_entries:
            raise UpstreamServiceError("Toggl API error: 503 - unavailable")
        per_entry = self.hours_seconds // max(self.entry_count, 1)
        entries = [
            TimeEntry(
                date=f"{month}-0{i + 1}",
                description=f"Task {i + 1}",
                duration_seconds=per_entry,
                duration_hours=seconds_to_hours(per_entry),
            )
            for i in range(self.entry_count)
        ]
        return TimeEntrySummary(
            total_seconds=self.hours_seconds,
            total_hours=seconds_to_hours(self.hours_seconds),
            entries=entries,
        )

    async def fetch_timesheet_pdf(self, project_id: str, month: str) -> bytes:
        if self.fail_pdf:
            raise UpstreamServiceError("Toggl Reports API error: 500 - boom")
        return self.pdf

    async def fetch_clients(self) -> List[TogglClientRecord]:
        return list(self.clients)

    async def verify_connection(self) -> dict:
        return {"success": True, "email": "dev@toggl.test"}

    async def fetch_month_to_date_hours(self) -> MonthToDateHours:
        self.mtd_calls += 1
        if self.fail_mtd:
            raise UpstreamServiceError("Toggl API error: 503 - unavailable")
        return MonthToDateHours(total_hours=self.mtd_hours, month="2026-10", entry_count=4)

    async def close(self) -> None:
        pass


class FakeBlobClient:
    """Blob storage kept in a dict keyed by blob path."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.deleted: List[str] = []
        self.fail_upload = False

    async def upload_pdf(self, data: bytes, blob_path: str) -> UploadResult:
        if self.fail_upload:
            raise UpstreamServiceError(f"Blob upload failed for {blob_path}: unavailable")
        self.blobs[blob_path] = data
        return UploadResult(url=f"https://blob.test/pdfs/{blob_path}", blob_name=blob_path)

    async def download_pdf(self, blob_path: str) -> bytes:
        if blob_path not in self.blobs:
            raise UpstreamServiceError(f"Blob not found: {blob_path}", status_code=404)
        return self.blobs[blob_path]

    async def delete_pdf(self, blob_path: str) -> bool:
        self.deleted.append(blob_path)
        return self.blobs.pop(blob_path, None) is not None


class FakeInvoiceGeneratorClient:
    """Records rendered payloads and returns a fixed document."""

    def __init__(self):
        self.payloads: List[dict] = []
        self.fail = False

    async def generate_pdf(self, payload: dict) -> bytes:
        if self.fail:
            raise UpstreamServiceError("Invoice generator API error: 500 - render failed")
        self.payloads.append(payload)
        return b"%PDF-invoice"

    async def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Deterministic settings for every test."""
    monkeypatch.setattr(settings, "JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "ADMIN_AUTH_ENABLED", True)
    monkeypatch.setattr(limiter, "enabled", False)
    return settings


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """A session for service-level tests."""
    async with test_session_maker() as session:
        yield session


@pytest.fixture
def fake_toggl():
    return FakeTogglClient()


@pytest.fixture
def fake_blob():
    return FakeBlobClient()


@pytest.fixture
def fake_invoice_generator():
    return FakeInvoiceGeneratorClient()


@pytest.fixture
def test_cache():
    return MemoryCache()


@pytest.fixture
def test_container(fake_toggl, fake_blob, fake_invoice_generator, test_cache):
    """The global container with every integration replaced by a fake."""
    container = get_container()
    container.toggl_client.override(providers.Object(fake_toggl))
    container.blob_client.override(providers.Object(fake_blob))
    container.invoice_generator_client.override(providers.Object(fake_invoice_generator))
    container.cache.override(providers.Object(test_cache))
    yield container
    container.toggl_client.reset_override()
    container.blob_client.reset_override()
    container.invoice_generator_client.reset_override()
    container.cache.reset_override()


@pytest.fixture(scope="function")
async def test_client(test_session_maker, test_container, monkeypatch):
    """
    HTTP client against the app, authenticated as a platform principal.
    Requests run against the in-memory database.
    """

    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(db_session, "async_session_maker", test_session_maker)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test", headers=PRINCIPAL_HEADERS) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_client(test_session_maker):
    """Factory that inserts a client row and returns it."""

    async def _make_client(
        name: str = "Acme Corp",
        toggl_project_id: Optional[str] = "123456",
        **kwargs,
    ) -> Client:
        async with test_session_maker() as session:
            client = Client(
                name=name,
                toggl_project_id=toggl_project_id,
                timesheet_recipients=kwargs.pop("timesheet_recipients", ["approver@acme.com"]),
                invoice_recipients=kwargs.pop("invoice_recipients", ["billing@acme.com"]),
                **kwargs,
            )
            session.add(client)
            await session.commit()
            await session.refresh(client)
            return client

    return _make_client


@pytest.fixture
def make_timesheet(test_session_maker):
    """Factory that inserts a timesheet row and returns it."""

    async def _make_timesheet(
        client_id,
        month: str = "2026-09",
        status: TimesheetStatus = TimesheetStatus.PENDING,
        total_hours: Decimal = Decimal("40.00"),
        invoice_number: Optional[int] = 1001,
        pdf_url: Optional[str] = None,
    ) -> Timesheet:
        async with test_session_maker() as session:
            timesheet = Timesheet(
                client_id=client_id,
                month=month,
                status=status,
                total_hours=total_hours,
                invoice_number=invoice_number,
                pdf_url=pdf_url,
            )
            session.add(timesheet)
            await session.commit()
            await session.refresh(timesheet)
            return timesheet

    return _make_timesheet
