"""
Invoice model, created when a timesheet is approved.
"""

from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from backoffice.db.base import Base, utcnow


class InvoiceStatus(str, enum.Enum):
    """Invoice status enumeration."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)
    # Kept when the source timesheet is force-replaced
    timesheet_id = Column(Uuid, ForeignKey("timesheets.id", ondelete="SET NULL"), nullable=True, index=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    month = Column(String(7), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(
        SQLEnum(InvoiceStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=InvoiceStatus.DRAFT,
        index=True,
    )
    pdf_url = Column(String(1024), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    client = relationship("Client", back_populates="invoices")
    timesheet = relationship("Timesheet", back_populates="invoices")
