"""
Monthly timesheet model and its approval states.
"""

from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from backoffice.db.base import Base, utcnow


class TimesheetStatus(str, enum.Enum):
    """
    Timesheet status enumeration.
    pending -> sent -> approved, or pending|sent -> rejected.
    """
    PENDING = "pending"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


class Timesheet(Base):
    """Timesheet model - one per client per month."""

    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("client_id", "month", name="uq_timesheet_client_month"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    status = Column(
        SQLEnum(TimesheetStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        nullable=False,
        default=TimesheetStatus.PENDING,
        index=True,
    )
    pdf_url = Column(String(1024), nullable=True)
    total_hours = Column(Numeric(10, 2), nullable=False, default=0)
    invoice_number = Column(Integer, nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    client = relationship("Client", back_populates="timesheets")
    invoices = relationship("Invoice", back_populates="timesheet", passive_deletes=True)
