"""Auth service — login and password change.

Learn: Login answers the same InvalidCredentials for "no such email" and
"wrong password", and both paths pay for one bcrypt comparison, so
neither the response nor its timing tells a caller whether an account
exists. Status is checked only after the password matched: AccountInactive
is never revealed to someone who doesn't hold the password.

Plaintext passwords are passed straight to CredentialStore and never
logged.
"""

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.policy import Principal
from peoplehub.auth.tokens import create_session_token
from peoplehub.db.models import User, UserStatus
from peoplehub.errors import (
    AccountInactive,
    Forbidden,
    IncorrectPassword,
    InvalidCredentials,
    NotFound,
)
from peoplehub.events.store import EventStore
from peoplehub.events.types import USER_PASSWORD_CHANGED
from peoplehub.stores.credentials import CredentialStore

logger = structlog.get_logger()


@dataclass
class LoginResult:
    user: User
    token: str


class AuthService:
    """Credential verification and session issuance."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.credentials = CredentialStore(db)
        self.events = EventStore(db)

    async def login(self, email: str, password: str) -> LoginResult:
        user = await self.credentials.get_by_email(email)

        if not self.credentials.check_password(user, password):
            logger.info(
                "auth.login_failed",
                reason="invalid_credentials",
                user_id=str(user.id) if user else None,
            )
            raise InvalidCredentials()

        if user.status is not UserStatus.ACTIVE:
            logger.info("auth.login_failed", reason="inactive", user_id=str(user.id))
            raise AccountInactive()

        token = create_session_token(str(user.id))
        logger.info("auth.login_succeeded", user_id=str(user.id), role=user.role.value)
        return LoginResult(user=user, token=token)

    async def change_password(
        self,
        principal: Principal,
        user_id: uuid.UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change one's own password, proving knowledge of the current one."""
        if principal.user_id != user_id:
            raise Forbidden("You can only change your own password")

        user = await self.credentials.get(user_id)
        if not user:
            raise NotFound("User not found")

        if not self.credentials.check_password(user, current_password):
            raise IncorrectPassword()

        await self.credentials.set_password(user, new_password)
        await self.events.append(
            stream_id=f"user:{user.id}",
            event_type=USER_PASSWORD_CHANGED,
            data={"user_id": str(user.id), "via": "change_password"},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()
        logger.info("auth.password_changed", user_id=str(user.id))
