"""
Client Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, List
from datetime import datetime
from uuid import UUID

from backoffice.models.client import ContactRole


def _coerce_external_id(value: Any) -> Any:
    """Toggl ids arrive as integers from the import dialog."""
    if isinstance(value, int):
        return str(value)
    return value


class ContactInput(BaseModel):
    """Contact entry supplied on create/update."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    role: ContactRole = ContactRole.BOTH


class ContactResponse(BaseModel):
    id: UUID
    name: str
    email: str
    role: ContactRole

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    """Schema for creating a client. Name and email checks happen in the service."""
    name: Optional[str] = None
    toggl_client_id: Optional[str] = None
    toggl_project_id: Optional[str] = None
    timesheet_recipients: List[str] = []
    invoice_recipients: List[str] = []
    notes: Optional[str] = None
    contacts: Optional[List[ContactInput]] = None

    @field_validator("toggl_client_id", "toggl_project_id", mode="before")
    @classmethod
    def coerce_toggl_ids(cls, value: Any) -> Any:
        return _coerce_external_id(value)


class ClientUpdate(BaseModel):
    """Schema for updating a client (all fields optional)."""
    name: Optional[str] = None
    toggl_client_id: Optional[str] = None
    toggl_project_id: Optional[str] = None
    timesheet_recipients: Optional[List[str]] = None
    invoice_recipients: Optional[List[str]] = None
    notes: Optional[str] = None
    contacts: Optional[List[ContactInput]] = None

    @field_validator("toggl_client_id", "toggl_project_id", mode="before")
    @classmethod
    def coerce_toggl_ids(cls, value: Any) -> Any:
        return _coerce_external_id(value)


class ClientResponse(BaseModel):
    """Schema for client response."""
    id: UUID
    name: str
    toggl_client_id: Optional[str] = None
    toggl_project_id: Optional[str] = None
    timesheet_recipients: List[str] = []
    invoice_recipients: List[str] = []
    notes: Optional[str] = None
    portal_token: Optional[str] = None
    portal_token_expires_at: Optional[datetime] = None
    contacts: List[ContactResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientListResponse(BaseModel):
    """Schema for client list response."""
    items: List[ClientResponse]
    total: int


class PortalTokenResponse(BaseModel):
    """A freshly issued portal token."""
    token: str
    expires_at: datetime
