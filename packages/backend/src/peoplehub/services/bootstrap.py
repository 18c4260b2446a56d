"""Superadmin seed — idempotent, run once per process under a lock.

Learn: The platform needs one superadmin to create the first company.
Seeding is an explicit step (app lifespan when enabled, or the
`peoplehub seed-superadmin` CLI command), not an import side effect:

- an asyncio.Lock (one per event loop) serializes concurrent callers
  inside one process
- an existing user with the seed email means "already seeded"
- a unique-email violation from a concurrent process is also treated
  as "already seeded"

Running it any number of times leaves exactly one superadmin behind.
"""

import asyncio
import weakref

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from peoplehub.config import settings
from peoplehub.db.models import Role, User
from peoplehub.errors import AlreadyExists
from peoplehub.events.store import EventStore
from peoplehub.events.types import USER_CREATED
from peoplehub.stores.credentials import CredentialStore

logger = structlog.get_logger()

# One lock per event loop; an asyncio.Lock may only be awaited on the loop it
# first blocked on.
_seed_locks: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()


def _seed_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _seed_locks.get(loop)
    if lock is None:
        lock = _seed_locks[loop] = asyncio.Lock()
    return lock


async def seed_superadmin(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str | None = None,
    name: str | None = None,
    password: str | None = None,
) -> tuple[User | None, bool]:
    """Ensure the superadmin exists. Returns (user, created)."""
    email = email or settings.superadmin_email
    name = name or settings.superadmin_name
    password = password or settings.superadmin_password
    if not password:
        logger.info("bootstrap.superadmin_skipped", reason="no_password_configured")
        return None, False

    async with _seed_lock():
        async with session_factory() as db:
            credentials = CredentialStore(db)
            existing = await credentials.get_by_email(email)
            if existing:
                logger.info("bootstrap.superadmin_exists", user_id=str(existing.id))
                return existing, False

            try:
                user = await credentials.create_user(
                    name=name,
                    email=email,
                    password=password,
                    role=Role.SUPERADMIN,
                )
            except AlreadyExists:
                existing = await credentials.get_by_email(email)
                logger.info("bootstrap.superadmin_exists", raced=True)
                return existing, False

            await EventStore(db).append(
                stream_id=f"user:{user.id}",
                event_type=USER_CREATED,
                data={"user_id": str(user.id), "role": Role.SUPERADMIN.value},
            )
            await db.commit()

            logger.info("bootstrap.superadmin_created", user_id=str(user.id))
            return user, True
