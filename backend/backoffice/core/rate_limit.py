"""
Rate limiter shared by the app and the portal endpoints.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from backoffice.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
