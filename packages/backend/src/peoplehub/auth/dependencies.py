"""FastAPI auth dependencies — the AuthGate.

Learn: These are used as Depends() in route handlers to turn the bearer
token on a request into a Principal.

1. The JWT's signature and expiry are checked statelessly (no DB).
2. The subject is then loaded to resolve role and company, so a user
   deactivated or deleted after login stops getting through at once.

Any failure is an Unauthenticated error (401, WWW-Authenticate: Bearer,
code "unauthenticated"). The resolved principal is also bound to
structlog's context so every log line of the request carries who made it.
"""

import uuid
from typing import Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.policy import Principal
from peoplehub.auth.tokens import TokenError, verify_session_token
from peoplehub.db.engine import get_db
from peoplehub.db.models import UserStatus
from peoplehub.errors import Unauthenticated
from peoplehub.stores.credentials import CredentialStore

logger = structlog.get_logger()


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        logger.info("auth.token_rejected", error="unsupported_scheme")
        raise Unauthenticated()
    return token.strip()


async def get_current_principal_optional(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Optional[Principal]:
    """Resolve the principal if a bearer token is present, else None.

    A token that IS present but fails verification is still a 401; only a
    missing Authorization header yields None. The caller never learns why
    a token was refused, only the log line does.
    """
    if not authorization:
        return None

    token = _bearer_token(authorization)
    try:
        payload = verify_session_token(token)
        user_id = uuid.UUID(payload["sub"])
    except (TokenError, ValueError) as e:
        logger.info("auth.token_rejected", error=str(e))
        raise Unauthenticated()

    user = await CredentialStore(db).get(user_id)
    if not user:
        logger.info("auth.token_rejected", error="unknown_user", user_id=str(user_id))
        raise Unauthenticated()
    if user.status is not UserStatus.ACTIVE:
        logger.info("auth.token_rejected", error="inactive_user", user_id=str(user_id))
        raise Unauthenticated()

    principal = Principal(user_id=user.id, role=user.role, company_id=user.company_id)
    structlog.contextvars.bind_contextvars(
        user_id=str(principal.user_id), role=principal.role.value
    )
    return principal


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_current_principal_optional),
) -> Principal:
    """Resolve the principal (required — 401 if no auth)."""
    if not principal:
        raise Unauthenticated()
    return principal
