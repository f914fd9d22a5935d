"""
Dashboard metric schemas.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class HoursMtdResponse(BaseModel):
    hours: float
    month: str
    entry_count: int
    is_stale: bool
    cached_at: datetime


class EarningsMtdResponse(BaseModel):
    earnings: Optional[float] = None  # None when no hourly rate is configured
    hours: float
    hourly_rate: Optional[float] = None
    month: str
    is_stale: bool
    cached_at: datetime
