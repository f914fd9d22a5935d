"""
API dependencies for authentication.
Admin routes trust the hosting platform's auth gate; portal routes authenticate with a signed token.
"""

from fastapi import HTTPException, Request, status

from backoffice.core.config import settings
from backoffice.core.security import PortalTokenPayload, verify_portal_token


async def require_platform_principal(request: Request) -> None:
    """
    Router-level guard for admin routes.

    The hosting platform (Azure App Service / Static Web Apps authentication)
    injects a client principal header on authenticated requests and strips it
    from anonymous ones, so its presence is the authentication check.

    Raises:
        HTTPException: 401 when the principal header is missing
    """
    if not settings.ADMIN_AUTH_ENABLED:
        return
    if not request.headers.get(settings.ADMIN_PRINCIPAL_HEADER):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )


async def get_portal_token(token: str) -> PortalTokenPayload:
    """
    Verify the portal token from the ``{token}`` path segment.

    Raises:
        PortalTokenExpiredError: Token past its expiry (401, ``expired: true``)
        InvalidPortalTokenError: Bad signature or malformed token (401)
    """
    return verify_portal_token(token)
