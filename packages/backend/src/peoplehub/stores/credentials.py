"""CredentialStore — the only owner of User records.

Learn: Two rules are enforced here and nowhere else.

1. Hashing happens at exactly one point. create_user, set_password and
   redeem_reset_token take PLAINTEXT and hash it on the way into the
   row. No caller ever sees or supplies a hash, so a password can't be
   hashed twice.

2. Token redemption is one conditional UPDATE:

       UPDATE users SET password_hash=..., reset_token=NULL, ...
       WHERE reset_token = :token AND reset_token_expires_at > :now
       RETURNING id

   Two concurrent redemptions of the same token race on the row, not on
   a read-then-write gap; the loser's WHERE no longer matches and it
   gets no row back.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.password import DUMMY_HASH, hash_password, verify_password
from peoplehub.db.models import Role, User, UserStatus, utcnow
from peoplehub.errors import AlreadyExists


class CredentialStore:
    """Persistence for users and their credentials."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ─────────────────────────────────────────

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role: Role,
        company_id: Optional[uuid.UUID] = None,
    ) -> User:
        """Create a user from a plaintext password.

        A failed create (duplicate email) rolls back the caller's unit of
        work before raising AlreadyExists.
        """
        if role is Role.SUPERADMIN and company_id is not None:
            raise ValueError("superadmin must not be bound to a company")
        if role is not Role.SUPERADMIN and company_id is None:
            raise ValueError(f"{role.value} requires a company")

        email = normalize_email(email)
        if await self.get_by_email(email):
            raise AlreadyExists("User already exists")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
            company_id=company_id,
            status=UserStatus.ACTIVE,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExists("User already exists")
        return user

    # ─── Lookup ─────────────────────────────────────────

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def list_users(self, company_id: Optional[uuid.UUID] = None) -> list[User]:
        """List users, scoped to one company unless company_id is None."""
        q = select(User)
        if company_id is not None:
            q = q.where(User.company_id == company_id)
        result = await self.db.execute(q.order_by(User.created_at, User.email))
        return list(result.scalars().all())

    # ─── Credentials ────────────────────────────────────

    @staticmethod
    def check_password(user: Optional[User], password: str) -> bool:
        """Constant-cost password check; a missing user still pays for bcrypt."""
        if user is None:
            verify_password(password, DUMMY_HASH)
            return False
        return verify_password(password, user.password_hash)

    async def set_password(self, user: User, password: str) -> None:
        user.password_hash = hash_password(password)
        await self.db.flush()

    async def set_status(self, user: User, status: UserStatus) -> None:
        user.status = status
        await self.db.flush()

    # ─── Reset tokens ───────────────────────────────────

    async def set_reset_token(
        self, user_id: uuid.UUID, token: str, expires_at: datetime
    ) -> None:
        """Store a reset token, replacing any earlier one for this user."""
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(reset_token=token, reset_token_expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )

    async def redeem_reset_token(
        self,
        token: str,
        new_password: str,
        now: Optional[datetime] = None,
    ) -> Optional[uuid.UUID]:
        """Atomically consume a live reset token and set the new password.

        Returns the user id, or None if the token is unknown, already
        used, or expired.
        """
        now = now or utcnow()
        result = await self.db.execute(
            update(User)
            .where(
                User.reset_token == token,
                User.reset_token_expires_at > now,
            )
            .values(
                password_hash=hash_password(new_password),
                reset_token=None,
                reset_token_expires_at=None,
            )
            .returning(User.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalars().first()


def normalize_email(email: str) -> str:
    return email.strip().lower()
