"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from backoffice.models.client import Client, Contact, ContactRole
from backoffice.models.timesheet import Timesheet, TimesheetStatus
from backoffice.models.invoice import Invoice, InvoiceStatus
from backoffice.models.setting import Setting

__all__ = [
    "Client",
    "Contact",
    "ContactRole",
    "Timesheet",
    "TimesheetStatus",
    "Invoice",
    "InvoiceStatus",
    "Setting",
]
