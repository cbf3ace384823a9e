"""Site key validation and session token (JWT) utilities."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from lingolive.core.config import settings
from lingolive.core.exceptions import InvalidSessionTokenError

SESSION_TOKEN_TYPE = "session"


def validate_site_key(site_key: str) -> bool:
    """Check a widget site key against the configured allow-list."""
    return site_key in settings.site_keys


def create_session_token(
    session_id: str,
    site_key: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a widget session token binding a session id to a site key."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.session_token_ttl_hours))
    claims = {
        "sessionId": session_id,
        "siteKey": site_key,
        "type": SESSION_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": expire,
    }
    return jwt.encode(
        claims,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and token type. Returns the decoded claims.

    Raises:
        InvalidSessionTokenError: On any signature, expiry or type failure.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise InvalidSessionTokenError(f"Invalid token: {e}") from e

    if claims.get("type") != SESSION_TOKEN_TYPE:
        raise InvalidSessionTokenError("Invalid token type")
    if not claims.get("sessionId") or not claims.get("siteKey"):
        raise InvalidSessionTokenError("Token is missing session claims")
    return claims
