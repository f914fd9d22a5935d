"""
Settings endpoint tests.
"""

import pytest


@pytest.mark.asyncio
async def test_hourly_rate_round_trip(test_client):
    empty = await test_client.get("/api/v1/settings/hourly-rate")
    saved = await test_client.put("/api/v1/settings/hourly-rate", json={"rate": 95.5})
    loaded = await test_client.get("/api/v1/settings/hourly-rate")

    assert empty.json()["rate"] is None
    assert saved.status_code == 200
    assert loaded.json()["rate"] == 95.5
    assert loaded.json()["updated_at"] is not None


@pytest.mark.asyncio
async def test_negative_hourly_rate_rejected(test_client):
    response = await test_client.put("/api/v1/settings/hourly-rate", json={"rate": -5})

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ['{"rate": 1e400}', '{"rate": NaN}', '{"rate": "lots"}'])
async def test_non_numeric_hourly_rate_rejected(test_client, body):
    response = await test_client.put(
        "/api/v1/settings/hourly-rate",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    loaded = await test_client.get("/api/v1/settings/hourly-rate")

    assert response.status_code == 400
    assert loaded.json()["rate"] is None


@pytest.mark.asyncio
async def test_business_profile_partial_update(test_client):
    await test_client.put(
        "/api/v1/settings/business-profile",
        json={"name": "Jane Dev Ltd", "email": "jane@janedev.co.nz", "payment_terms_days": 30},
    )

    response = await test_client.put("/api/v1/settings/business-profile", json={"tax_rate": 15})

    data = response.json()
    assert data["name"] == "Jane Dev Ltd"
    assert data["email"] == "jane@janedev.co.nz"
    assert data["payment_terms_days"] == 30
    assert data["tax_rate"] == 15
    assert data["next_invoice_number"] == 1


@pytest.mark.asyncio
async def test_business_profile_rejects_bad_tax_rate(test_client):
    response = await test_client.put("/api/v1/settings/business-profile", json={"tax_rate": 150})

    assert response.status_code == 400
    assert response.json()["error"] == "Tax rate must be between 0 and 100"


@pytest.mark.asyncio
async def test_business_profile_email_is_checked_and_trimmed(test_client):
    rejected = await test_client.put("/api/v1/settings/business-profile", json={"email": "jane@janedev"})
    saved = await test_client.put("/api/v1/settings/business-profile", json={"email": "jane@janedev.co.nz\n"})

    assert rejected.status_code == 400
    assert rejected.json()["error"] == "Invalid email address"
    assert saved.json()["email"] == "jane@janedev.co.nz"
