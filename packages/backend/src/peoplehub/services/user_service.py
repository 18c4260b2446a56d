"""User service — tenant-scoped user listing and status toggling."""

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.policy import (
    Permission,
    Principal,
    ensure_permission,
    ensure_tenant_access,
    scope_company_id,
)
from peoplehub.db.models import User, UserStatus
from peoplehub.errors import NotFound
from peoplehub.events.store import EventStore
from peoplehub.events.types import USER_STATUS_CHANGED
from peoplehub.stores.credentials import CredentialStore

logger = structlog.get_logger()


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.credentials = CredentialStore(db)
        self.events = EventStore(db)

    async def list_users(
        self,
        principal: Principal,
        company_id: Optional[uuid.UUID] = None,
    ) -> list[User]:
        """List users visible to the principal.

        A superadmin may filter by any company; everyone else is pinned to
        their own, and asking for another company is Forbidden rather than
        silently ignored.
        """
        ensure_permission(principal, Permission.VIEW_USERS)
        scope = scope_company_id(principal)
        if scope is None:
            return await self.credentials.list_users(company_id)
        if company_id is not None:
            ensure_tenant_access(principal, company_id)
        return await self.credentials.list_users(scope)

    async def get_user(self, principal: Principal, user_id: uuid.UUID) -> User:
        user = await self.credentials.get(user_id)
        if not user:
            raise NotFound("User not found")
        if user.id != principal.user_id:
            ensure_tenant_access(principal, user.company_id)
        return user

    async def set_status(
        self,
        principal: Principal,
        user_id: uuid.UUID,
        status: UserStatus,
    ) -> User:
        ensure_permission(principal, Permission.MANAGE_USERS)
        user = await self.credentials.get(user_id)
        if not user:
            raise NotFound("User not found")
        ensure_tenant_access(principal, user.company_id)

        previous = user.status
        await self.credentials.set_status(user, status)
        await self.events.append(
            stream_id=f"user:{user.id}",
            event_type=USER_STATUS_CHANGED,
            data={"from": previous.value, "to": status.value},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()

        logger.info("user.status_changed", user_id=str(user.id), status=status.value)
        return user
