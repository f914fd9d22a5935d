"""
Portal token signing and verification.

Portal tokens are HS256 JWTs carrying a single ``client_id`` claim and a fixed
expiry. They grant a client read/approve access to its own timesheets. The
copy stored on the client row is for reference only; a regenerated token does
not revoke older ones, which stay valid until their own ``exp``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt

from backoffice.core.config import settings
from backoffice.core.exceptions import (
    ConfigurationError,
    InvalidPortalTokenError,
    PortalTokenExpiredError,
)


@dataclass(frozen=True)
class PortalTokenPayload:
    """Decoded portal token claims."""
    client_id: UUID
    issued_at: datetime
    expires_at: datetime


def _get_jwt_secret() -> str:
    if not settings.JWT_SECRET:
        raise ConfigurationError("JWT_SECRET environment variable is not set")
    return settings.JWT_SECRET


def _to_payload(claims: dict) -> PortalTokenPayload:
    client_id = claims.get("client_id")
    if not client_id:
        raise InvalidPortalTokenError("Invalid token: missing client_id")
    try:
        return PortalTokenPayload(
            client_id=UUID(str(client_id)),
            issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidPortalTokenError("Invalid token: malformed claims")


def issue_portal_token(client_id: UUID, now: Optional[datetime] = None) -> str:
    """
    Sign a new portal token for a client.

    Args:
        client_id: The client's id
        now: Issue time, defaults to the current UTC time

    Returns:
        The signed token
    """
    issued_at = now or datetime.now(tz=timezone.utc)
    expires_at = issued_at + timedelta(days=settings.PORTAL_TOKEN_EXPIRE_DAYS)
    payload = {
        "client_id": str(client_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)


def verify_portal_token(token: str) -> PortalTokenPayload:
    """
    Verify the signature and expiry of a portal token.

    Raises:
        PortalTokenExpiredError: The token is past its expiry
        InvalidPortalTokenError: Bad signature, malformed token or missing claims
    """
    secret = _get_jwt_secret()
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise PortalTokenExpiredError()
    except jwt.InvalidTokenError:
        raise InvalidPortalTokenError()
    return _to_payload(claims)


def decode_portal_token(token: str) -> Optional[PortalTokenPayload]:
    """
    Read the claims of a portal token without checking its signature.
    For display purposes only, never for authorization.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
        return _to_payload(claims)
    except (jwt.InvalidTokenError, InvalidPortalTokenError):
        return None


def get_token_expiry(token: str) -> Optional[datetime]:
    """Expiry of a token, or None when it cannot be decoded."""
    payload = decode_portal_token(token)
    return payload.expires_at if payload else None


def is_token_expired(token: str, now: Optional[datetime] = None) -> bool:
    """True when the token is expired or cannot be decoded."""
    payload = decode_portal_token(token)
    if payload is None:
        return True
    return payload.expires_at < (now or datetime.now(tz=timezone.utc))
