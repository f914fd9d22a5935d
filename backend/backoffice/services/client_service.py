"""
Client service with business logic.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.core.security import get_token_expiry, issue_portal_token
from backoffice.db.repositories.client_repository import ClientRepository
from backoffice.models.client import Client, Contact
from backoffice.schemas.client import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    ContactInput,
    PortalTokenResponse,
)
from backoffice.services.base_service import BaseService
from backoffice.utils.validation import find_invalid_emails

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_emails(
    timesheet_recipients: Optional[List[str]],
    invoice_recipients: Optional[List[str]],
    contacts: Optional[List[ContactInput]],
) -> None:
    emails = list(timesheet_recipients or []) + list(invoice_recipients or [])
    emails += [contact.email for contact in contacts or []]
    invalid = find_invalid_emails(emails)
    if invalid:
        raise ValidationError(
            "Invalid email address(es) provided",
            details={"invalid_emails": invalid},
        )


def _build_contacts(contacts: List[ContactInput]) -> List[Contact]:
    return [
        Contact(name=contact.name.strip(), email=contact.email.strip(), role=contact.role)
        for contact in contacts
    ]


def to_client_response(client: Client) -> ClientResponse:
    response = ClientResponse.model_validate(client)
    if client.portal_token:
        response.portal_token_expires_at = get_token_expiry(client.portal_token)
    return response


class ClientService(BaseService):
    """Service for client operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.client_repo = ClientRepository(session)

    async def _get_or_404(self, client_id: UUID) -> Client:
        client = await self.client_repo.get(client_id)
        if not client:
            raise NotFoundError("Client not found")
        return client

    async def _ensure_toggl_client_unused(self, toggl_client_id: Optional[str], client_id: Optional[UUID] = None) -> None:
        if not toggl_client_id:
            return
        existing = await self.client_repo.get_by_toggl_client_id(toggl_client_id)
        if existing and existing.id != client_id:
            raise ConflictError(
                "A client with this Toggl client ID already exists",
                details={"existing_client_id": str(existing.id)},
            )

    async def create_client(self, client_data: ClientCreate) -> ClientResponse:
        """
        Create a new client.

        Raises:
            ValidationError: Missing name or invalid recipient emails
            ConflictError: The Toggl client is already imported
        """
        name = _blank_to_none(client_data.name)
        if not name:
            raise ValidationError("Client name is required")

        _check_emails(
            client_data.timesheet_recipients,
            client_data.invoice_recipients,
            client_data.contacts,
        )

        toggl_client_id = _blank_to_none(client_data.toggl_client_id)
        await self._ensure_toggl_client_unused(toggl_client_id)

        client = await self.client_repo.create(
            name=name,
            toggl_client_id=toggl_client_id,
            toggl_project_id=_blank_to_none(client_data.toggl_project_id),
            timesheet_recipients=[e.strip() for e in client_data.timesheet_recipients],
            invoice_recipients=[e.strip() for e in client_data.invoice_recipients],
            notes=client_data.notes,
            contacts=_build_contacts(client_data.contacts or []),
        )
        await self.session.commit()

        logger.info("Client created", extra={"client_id": str(client.id)})
        return to_client_response(client)

    async def get_client(self, client_id: UUID) -> ClientResponse:
        """Get client by ID."""
        return to_client_response(await self._get_or_404(client_id))

    async def list_clients(self) -> tuple[List[ClientResponse], int]:
        """List all clients, newest first."""
        clients = await self.client_repo.list(limit=1000)
        return [to_client_response(client) for client in clients], len(clients)

    async def update_client(
        self,
        client_id: UUID,
        client_data: ClientUpdate,
    ) -> ClientResponse:
        """
        Apply a partial update.
        An empty toggl_project_id unlinks the project; a supplied contacts list replaces the old one.
        """
        client = await self._get_or_404(client_id)
        changes = client_data.model_dump(exclude_unset=True)

        updates: Dict[str, Any] = {}
        if "name" in changes:
            name = _blank_to_none(client_data.name)
            if not name:
                raise ValidationError("Client name is required")
            updates["name"] = name

        _check_emails(
            client_data.timesheet_recipients,
            client_data.invoice_recipients,
            client_data.contacts,
        )

        if "toggl_client_id" in changes:
            toggl_client_id = _blank_to_none(client_data.toggl_client_id)
            await self._ensure_toggl_client_unused(toggl_client_id, client_id=client.id)
            updates["toggl_client_id"] = toggl_client_id
        if "toggl_project_id" in changes:
            updates["toggl_project_id"] = _blank_to_none(client_data.toggl_project_id)
        for key in ("timesheet_recipients", "invoice_recipients"):
            if changes.get(key) is not None:
                updates[key] = [e.strip() for e in changes[key]]
        if "notes" in changes:
            updates["notes"] = client_data.notes
        if client_data.contacts is not None:
            updates["contacts"] = _build_contacts(client_data.contacts)

        updated = await self.client_repo.update(client, **updates)
        await self.session.commit()

        logger.info("Client updated", extra={"client_id": str(client_id), "fields": sorted(updates)})
        return to_client_response(updated)

    async def delete_client(self, client_id: UUID) -> None:
        """
        Delete a client.

        Raises:
            NotFoundError: Unknown client
            ConflictError: Timesheets or invoices still reference the client
        """
        await self._get_or_404(client_id)

        references = await self.client_repo.count_references(client_id)
        if references:
            raise ConflictError(
                "Cannot delete client with existing timesheets or invoices",
                details={"reference_count": references},
            )

        await self.client_repo.delete(client_id)
        await self.session.commit()
        logger.info("Client deleted", extra={"client_id": str(client_id)})

    async def regenerate_portal_token(self, client_id: UUID) -> PortalTokenResponse:
        """Issue a new portal token and store it on the client."""
        client = await self._get_or_404(client_id)
        token = await self.refresh_portal_token(client)
        await self.session.commit()
        return PortalTokenResponse(token=token, expires_at=get_token_expiry(token))

    async def refresh_portal_token(self, client: Client) -> str:
        """Issue a token for a loaded client without committing."""
        token = issue_portal_token(client.id)
        await self.client_repo.update(client, portal_token=token)
        logger.info("Portal token issued", extra={"client_id": str(client.id)})
        return token
