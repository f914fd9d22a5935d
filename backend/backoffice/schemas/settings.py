"""
Settings Pydantic schemas (hourly rate and business profile).
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class HourlyRateResponse(BaseModel):
    rate: Optional[float] = None
    updated_at: Optional[datetime] = None


class HourlyRateUpdate(BaseModel):
    rate: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class BusinessProfileResponse(BaseModel):
    """Business details printed on invoices."""
    name: Optional[str] = None
    business_number: Optional[str] = None
    gst_number: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    payment_details: Optional[str] = None
    tax_rate: Optional[float] = None
    payment_terms: Optional[str] = None
    payment_terms_days: int = 14
    next_invoice_number: int = 1
    updated_at: Optional[datetime] = None


class BusinessProfileUpdate(BaseModel):
    """
    Partial business profile update.
    Omitted fields are left unchanged; empty strings clear a field.
    Range checks are applied by the settings service.
    """
    name: Optional[str] = None
    business_number: Optional[str] = None
    gst_number: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    payment_details: Optional[str] = None
    tax_rate: Optional[float] = None
    payment_terms: Optional[str] = None
    payment_terms_days: Optional[int] = None
    next_invoice_number: Optional[int] = None
