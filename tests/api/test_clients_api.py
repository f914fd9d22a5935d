"""
Client endpoint tests.
"""

import uuid

import pytest

from backoffice.core.config import settings
from backoffice.core.security import verify_portal_token


@pytest.mark.asyncio
async def test_create_client(test_client):
    response = await test_client.post(
        "/api/v1/clients",
        json={
            "name": "  Acme Corp ",
            "toggl_client_id": 987,
            "toggl_project_id": 123456,
            "timesheet_recipients": ["approver@acme.com"],
            "invoice_recipients": ["billing@acme.com"],
            "contacts": [{"name": "Ann", "email": "ann@acme.com", "role": "approver"}],
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Acme Corp"
    assert data["toggl_client_id"] == "987"
    assert data["toggl_project_id"] == "123456"
    assert data["contacts"][0]["role"] == "approver"
    assert data["portal_token"] is None


@pytest.mark.asyncio
async def test_create_client_requires_name(test_client):
    response = await test_client.post("/api/v1/clients", json={"name": "   "})

    assert response.status_code == 400
    assert response.json()["error"] == "Client name is required"


@pytest.mark.asyncio
async def test_create_client_rejects_invalid_emails(test_client):
    response = await test_client.post(
        "/api/v1/clients",
        json={
            "name": "Acme Corp",
            "timesheet_recipients": ["ok@acme.com", "nope"],
            "invoice_recipients": ["also bad@acme"],
        },
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid email address(es) provided"
    assert body["invalid_emails"] == ["nope", "also bad@acme"]


@pytest.mark.asyncio
async def test_duplicate_toggl_client_conflicts(test_client, make_client):
    existing = await make_client(toggl_client_id="987")

    response = await test_client.post("/api/v1/clients", json={"name": "Copy", "toggl_client_id": "987"})

    assert response.status_code == 409
    assert response.json()["existing_client_id"] == str(existing.id)


@pytest.mark.asyncio
async def test_list_and_get_clients(test_client, make_client):
    client = await make_client()
    await make_client(name="Globex")

    listing = await test_client.get("/api/v1/clients")
    single = await test_client.get(f"/api/v1/clients/{client.id}")
    missing = await test_client.get(f"/api/v1/clients/{uuid.uuid4()}")

    assert listing.json()["total"] == 2
    assert single.json()["name"] == "Acme Corp"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_patch_updates_only_supplied_fields(test_client, make_client):
    client = await make_client(notes="keep me")

    response = await test_client.patch(
        f"/api/v1/clients/{client.id}",
        json={"toggl_project_id": "", "invoice_recipients": ["new@acme.com"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["toggl_project_id"] is None
    assert data["invoice_recipients"] == ["new@acme.com"]
    assert data["timesheet_recipients"] == ["approver@acme.com"]
    assert data["notes"] == "keep me"


@pytest.mark.asyncio
async def test_patch_rejects_invalid_contact_email(test_client, make_client):
    client = await make_client()

    response = await test_client.patch(
        f"/api/v1/clients/{client.id}",
        json={"contacts": [{"name": "Bob", "email": "bob-at-acme"}]},
    )

    assert response.status_code == 400
    assert response.json()["invalid_emails"] == ["bob-at-acme"]


@pytest.mark.asyncio
async def test_delete_client_without_history(test_client, make_client):
    client = await make_client()

    response = await test_client.delete(f"/api/v1/clients/{client.id}")

    assert response.status_code == 204
    assert (await test_client.get(f"/api/v1/clients/{client.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_client_with_timesheets_conflicts(test_client, make_client, make_timesheet):
    client = await make_client()
    await make_timesheet(client.id)

    response = await test_client.delete(f"/api/v1/clients/{client.id}")

    assert response.status_code == 409
    assert response.json()["error"] == "Cannot delete client with existing timesheets or invoices"


@pytest.mark.asyncio
async def test_regenerate_token(test_client, make_client):
    client = await make_client()

    response = await test_client.post(f"/api/v1/clients/{client.id}/regenerate-token")

    assert response.status_code == 200
    token = response.json()["token"]
    assert verify_portal_token(token).client_id == client.id
    stored = (await test_client.get(f"/api/v1/clients/{client.id}")).json()
    assert stored["portal_token"] == token
    assert stored["portal_token_expires_at"] is not None


@pytest.mark.asyncio
async def test_admin_routes_require_principal(test_client):
    response = await test_client.get("/api/v1/clients", headers={"X-MS-CLIENT-PRINCIPAL": ""})

    assert response.status_code == 401
    assert response.json()["error"] == "Authentication required"


@pytest.mark.asyncio
async def test_principal_check_can_be_disabled(test_client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_AUTH_ENABLED", False)

    response = await test_client.get("/api/v1/clients", headers={"X-MS-CLIENT-PRINCIPAL": ""})

    assert response.status_code == 200
