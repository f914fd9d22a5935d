"""
Client model and its legacy contact list.
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from backoffice.db.base import Base, utcnow


class ContactRole(str, enum.Enum):
    """Which documents a contact receives."""
    APPROVER = "approver"
    BILLING = "billing"
    BOTH = "both"


class Client(Base):
    """A billable client, optionally linked to a Toggl client and project."""

    __tablename__ = "clients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    toggl_client_id = Column(String(50), nullable=True, unique=True, index=True)
    toggl_project_id = Column(String(50), nullable=True)
    timesheet_recipients = Column(JSON, nullable=False, default=list)
    invoice_recipients = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    portal_token = Column(Text, nullable=True)  # Latest issued token, reference only
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    contacts = relationship(
        "Contact",
        back_populates="client",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Contact.name",
    )
    timesheets = relationship("Timesheet", back_populates="client", passive_deletes=True)
    invoices = relationship("Invoice", back_populates="client", passive_deletes=True)


class Contact(Base):
    """Contact model (many-to-one with Client)."""

    __tablename__ = "contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(ContactRole, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=ContactRole.BOTH,
    )

    # Relationships
    client = relationship("Client", back_populates="contacts")
