"""Session and opaque token issuance.

Learn: Two very different kinds of token live here.
- Session token: a JWT signed with the process-wide secret. It embeds the
  subject (user id) and a fixed 24h expiry, so verification needs no
  database lookup.
- Opaque token: random bytes with no embedded claims, used for
  invitations and password resets. It means nothing by itself; validity
  is decided only by finding it in the store before its expiry.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from peoplehub.config import settings

SESSION_TOKEN_TYPE = "session"


class TokenError(Exception):
    """Raised when session token verification fails."""


def create_session_token(
    user_id: str,
    expires_hours: Optional[int] = None,
) -> str:
    """Create a signed session token for a user."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(
        hours=expires_hours or settings.session_token_expire_hours
    )
    payload = {
        "sub": user_id,
        "type": SESSION_TOKEN_TYPE,
        "exp": expires,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str) -> dict:
    """Verify and decode a session token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise TokenError("Not a session token")
    return payload


def new_opaque_token() -> str:
    """Random single-use token (hex, fixed length, >=160 bits of entropy)."""
    return secrets.token_hex(settings.opaque_token_bytes)


def expiry_from_now(**delta) -> datetime:
    """Absolute UTC expiry for an opaque token, e.g. expiry_from_now(hours=24)."""
    return datetime.now(timezone.utc) + timedelta(**delta)
