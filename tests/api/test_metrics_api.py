"""
Dashboard metric endpoint tests.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from backoffice.core.integrations.toggl.toggl_client import MonthToDateHours
from backoffice.db.repositories.setting_repository import SettingRepository
from backoffice.services.metrics_service import hours_cache_key


def current_key() -> str:
    return hours_cache_key(datetime.now(tz=timezone.utc).strftime("%Y-%m"))


@pytest.mark.asyncio
async def test_hours_mtd_is_cached(test_client, fake_toggl):
    first = await test_client.get("/api/v1/metrics/hours-mtd")
    second = await test_client.get("/api/v1/metrics/hours-mtd")

    assert first.status_code == 200
    assert first.json()["hours"] == 12.5
    assert first.json()["entry_count"] == 4
    assert first.json()["is_stale"] is False
    assert second.json()["cached_at"] == first.json()["cached_at"]
    assert fake_toggl.mtd_calls == 1


@pytest.mark.asyncio
async def test_hours_mtd_serves_stale_data_when_toggl_fails(test_client, fake_toggl, test_cache):
    test_cache.set(
        current_key(),
        MonthToDateHours(total_hours=Decimal("8.00"), month="2026-10", entry_count=2),
        ttl_seconds=-1,
    )
    fake_toggl.fail_mtd = True

    response = await test_client.get("/api/v1/metrics/hours-mtd")

    assert response.status_code == 200
    assert response.json()["hours"] == 8.0
    assert response.json()["is_stale"] is True


@pytest.mark.asyncio
async def test_hours_mtd_fails_without_cache(test_client, fake_toggl):
    fake_toggl.fail_mtd = True

    response = await test_client.get("/api/v1/metrics/hours-mtd")

    assert response.status_code == 502


@pytest.mark.asyncio
async def test_earnings_mtd_uses_hourly_rate(test_client):
    await test_client.put("/api/v1/settings/hourly-rate", json={"rate": 120})

    response = await test_client.get("/api/v1/metrics/earnings-mtd")

    data = response.json()
    assert data["earnings"] == 1500.0
    assert data["hourly_rate"] == 120.0
    assert data["hours"] == 12.5


@pytest.mark.asyncio
async def test_earnings_mtd_without_rate(test_client):
    response = await test_client.get("/api/v1/metrics/earnings-mtd")

    assert response.status_code == 200
    assert response.json()["earnings"] is None


@pytest.mark.asyncio
async def test_earnings_mtd_ignores_unusable_stored_rate(test_client, test_session_maker):
    async with test_session_maker() as session:
        await SettingRepository(session).upsert("hourlyRate", {"rate": float("inf")})
        await session.commit()

    response = await test_client.get("/api/v1/metrics/earnings-mtd")

    assert response.status_code == 200
    assert response.json()["earnings"] is None
