"""Password reset workflow — request a token, redeem it once.

Learn: The lifecycle of a reset token:
1. request_reset(email) → fresh opaque token, 1h expiry, stored on the
   user (overwriting any earlier one: only the latest token works)
2. a mail with the redemption link is handed back to the caller to
   dispatch in the background
3. redeem_reset(token, new_password) → one conditional UPDATE that
   checks the token + expiry, stores the new hash, and clears the token

The caller gets the same acknowledgment whether or not the email exists.
The older behavior (404 for unknown emails) can be switched back on with
PEOPLEHUB_REVEAL_UNKNOWN_RESET_EMAIL while product decides; it leaks
which accounts exist.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.tokens import expiry_from_now, new_opaque_token
from peoplehub.config import settings
from peoplehub.errors import InvalidOrExpiredToken, NotFound
from peoplehub.events.store import EventStore
from peoplehub.events.types import PASSWORD_RESET_COMPLETED, PASSWORD_RESET_REQUESTED
from peoplehub.services.mailer import MailMessage, password_reset_message
from peoplehub.stores.credentials import CredentialStore

logger = structlog.get_logger()


class PasswordResetService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.credentials = CredentialStore(db)
        self.events = EventStore(db)

    async def request_reset(self, email: str) -> Optional[MailMessage]:
        """Issue a reset token. Returns the mail to send, or None if no such user."""
        user = await self.credentials.get_by_email(email)
        if not user:
            logger.info("password_reset.unknown_email")
            if settings.reveal_unknown_reset_email:
                raise NotFound("User not found")
            return None

        token = new_opaque_token()
        await self.credentials.set_reset_token(
            user.id,
            token,
            expiry_from_now(minutes=settings.reset_token_expire_minutes),
        )
        await self.events.append(
            stream_id=f"user:{user.id}",
            event_type=PASSWORD_RESET_REQUESTED,
            data={"user_id": str(user.id)},
        )
        await self.db.commit()

        logger.info("password_reset.requested", user_id=str(user.id))
        return password_reset_message(user.email, token)

    async def redeem_reset(self, token: str, new_password: str) -> uuid.UUID:
        """Consume a reset token and set the new password."""
        user_id = await self.credentials.redeem_reset_token(token, new_password)
        if user_id is None:
            await self.db.rollback()
            logger.info("password_reset.rejected")
            raise InvalidOrExpiredToken()

        await self.events.append(
            stream_id=f"user:{user_id}",
            event_type=PASSWORD_RESET_COMPLETED,
            data={"user_id": str(user_id)},
        )
        await self.db.commit()

        logger.info("password_reset.completed", user_id=str(user_id))
        return user_id
