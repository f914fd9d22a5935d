"""
Settings service.
Hourly rate and business profile, persisted as JSON rows in the settings table.
"""

import math
from decimal import Decimal
from typing import Any, Dict, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.exceptions import ValidationError
from backoffice.db.repositories.setting_repository import SettingRepository
from backoffice.schemas.settings import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    HourlyRateResponse,
)
from backoffice.services.base_service import BaseService
from backoffice.utils.validation import is_valid_email

logger = logging.getLogger(__name__)

HOURLY_RATE_KEY = "hourlyRate"
BUSINESS_PROFILE_KEY = "businessProfile"

DEFAULT_PAYMENT_TERMS_DAYS = 14

DEFAULT_BUSINESS_PROFILE: Dict[str, Any] = {
    "name": None,
    "business_number": None,
    "gst_number": None,
    "phone": None,
    "email": None,
    "address": None,
    "payment_details": None,
    "tax_rate": None,
    "payment_terms": None,
    "payment_terms_days": DEFAULT_PAYMENT_TERMS_DAYS,
    "next_invoice_number": 1,
}

TEXT_FIELDS = (
    "name",
    "business_number",
    "gst_number",
    "phone",
    "email",
    "address",
    "payment_details",
    "payment_terms",
)


def _merge_profile(stored: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    profile = dict(DEFAULT_BUSINESS_PROFILE)
    for key, value in (stored or {}).items():
        if key in profile and value is not None:
            profile[key] = value
    return profile


def _validate_profile_updates(changes: Dict[str, Any]) -> None:
    email = changes.get("email")
    if email and not is_valid_email(email):
        raise ValidationError("Invalid email address")

    tax_rate = changes.get("tax_rate")
    if tax_rate is not None and not 0 <= tax_rate <= 100:
        raise ValidationError("Tax rate must be between 0 and 100")

    if "next_invoice_number" in changes:
        number = changes["next_invoice_number"]
        if number is None or number < 1:
            raise ValidationError("Next invoice number must be a positive integer")

    if "payment_terms_days" in changes:
        days = changes["payment_terms_days"]
        if days is None or days < 0:
            raise ValidationError("Payment terms days must be zero or more")


class SettingsService(BaseService):
    """Service for application settings."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.setting_repo = SettingRepository(session)

    async def get_hourly_rate(self) -> HourlyRateResponse:
        setting = await self.setting_repo.get(HOURLY_RATE_KEY)
        if setting is None:
            return HourlyRateResponse(rate=None, updated_at=None)
        return HourlyRateResponse(
            rate=(setting.value or {}).get("rate"),
            updated_at=setting.updated_at,
        )

    async def get_hourly_rate_decimal(self) -> Optional[Decimal]:
        """Hourly rate as a Decimal for money arithmetic, None when unset or unusable."""
        rate = (await self.get_hourly_rate()).rate
        if rate is None:
            return None
        if not math.isfinite(rate):
            logger.warning("Ignoring stored hourly rate that is not a finite number", extra={"rate": str(rate)})
            return None
        return Decimal(str(rate))

    async def set_hourly_rate(self, rate: Optional[float]) -> HourlyRateResponse:
        """
        Store the hourly rate.

        Raises:
            ValidationError: rate is negative or not a finite number
        """
        if rate is not None and (not math.isfinite(rate) or rate < 0):
            raise ValidationError("Hourly rate must be a non-negative number")

        setting = await self.setting_repo.upsert(HOURLY_RATE_KEY, {"rate": rate})
        await self.session.commit()
        logger.info("Hourly rate updated", extra={"rate": rate})
        return HourlyRateResponse(rate=rate, updated_at=setting.updated_at)

    async def get_business_profile(self) -> BusinessProfileResponse:
        setting = await self.setting_repo.get(BUSINESS_PROFILE_KEY)
        if setting is None:
            return BusinessProfileResponse(**DEFAULT_BUSINESS_PROFILE)
        return BusinessProfileResponse(
            **_merge_profile(setting.value),
            updated_at=setting.updated_at,
        )

    async def set_business_profile(self, updates: BusinessProfileUpdate) -> BusinessProfileResponse:
        """
        Merge a partial update into the stored profile.
        Empty strings clear text fields.
        """
        changes = updates.model_dump(exclude_unset=True)
        for key in TEXT_FIELDS:
            if key in changes and isinstance(changes[key], str):
                changes[key] = changes[key].strip() or None

        _validate_profile_updates(changes)

        current = await self.setting_repo.get(BUSINESS_PROFILE_KEY)
        profile = _merge_profile(current.value if current else None)
        profile.update(changes)

        setting = await self.setting_repo.upsert(BUSINESS_PROFILE_KEY, profile)
        await self.session.commit()
        logger.info("Business profile updated", extra={"fields": sorted(changes)})
        return BusinessProfileResponse(**profile, updated_at=setting.updated_at)

    async def get_and_increment_next_invoice_number(self) -> int:
        """
        Return the next invoice number and advance the stored counter.
        The settings row is locked for the rest of the caller's transaction.
        """
        setting = await self.setting_repo.get_for_update(BUSINESS_PROFILE_KEY)
        profile = _merge_profile(setting.value if setting else None)

        current_number = int(profile["next_invoice_number"])
        profile["next_invoice_number"] = current_number + 1

        await self.setting_repo.upsert(BUSINESS_PROFILE_KEY, profile)
        return current_number
