"""Staff service — employees and service managers inside one company.

Learn: These are the thin HR features that sit behind the gate. A
companyadmin onboards staff into their OWN company only: the new user's
company_id always comes from the principal, never from the request body,
so there is no field a caller could point at another tenant.
"""

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
from peoplehub.db.models import Employee, Role, ServiceManager, User, UserStatus
from peoplehub.errors import Forbidden, NotFound
from peoplehub.events.store import EventStore
from peoplehub.events.types import USER_CREATED, USER_STATUS_CHANGED
from peoplehub.stores.credentials import CredentialStore
from peoplehub.stores.staff import StaffStore

logger = structlog.get_logger()


class StaffService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.credentials = CredentialStore(db)
        self.staff = StaffStore(db)
        self.events = EventStore(db)

    # ─── Employees ──────────────────────────────────────

    async def create_employee(
        self,
        principal: Principal,
        *,
        name: str,
        email: str,
        password: str,
        department: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Employee:
        ensure_permission(principal, Permission.MANAGE_EMPLOYEES)
        user = await self._create_staff_user(
            principal, Role.EMPLOYEE, name=name, email=email, password=password
        )
        employee = await self.staff.add_employee(
            user=user, department=department, designation=designation
        )
        await self.db.commit()
        return employee

    async def list_employees(self, principal: Principal) -> list[Employee]:
        ensure_permission(principal, Permission.VIEW_EMPLOYEES)
        return await self.staff.list_employees(scope_company_id(principal))

    async def set_employee_status(
        self,
        principal: Principal,
        employee_id: uuid.UUID,
        status: UserStatus,
    ) -> Employee:
        ensure_permission(principal, Permission.MANAGE_EMPLOYEES)
        employee = await self.staff.get_employee(employee_id)
        if not employee:
            raise NotFound("Employee not found")
        ensure_tenant_access(principal, employee.company_id)

        previous = employee.user.status
        await self.credentials.set_status(employee.user, status)
        await self.events.append(
            stream_id=f"user:{employee.user_id}",
            event_type=USER_STATUS_CHANGED,
            data={"from": previous.value, "to": status.value},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()
        return employee

    # ─── Service managers ───────────────────────────────

    async def create_service_manager(
        self,
        principal: Principal,
        *,
        name: str,
        email: str,
        password: str,
        department: Optional[str] = None,
    ) -> ServiceManager:
        ensure_permission(principal, Permission.MANAGE_SERVICE_MANAGERS)
        user = await self._create_staff_user(
            principal, Role.SERVICE_MANAGER, name=name, email=email, password=password
        )
        manager = await self.staff.add_service_manager(user=user, department=department)
        await self.db.commit()
        return manager

    async def list_service_managers(self, principal: Principal) -> list[ServiceManager]:
        ensure_permission(principal, Permission.VIEW_SERVICE_MANAGERS)
        return await self.staff.list_service_managers(scope_company_id(principal))

    # ─── Helpers ────────────────────────────────────────

    async def _create_staff_user(
        self,
        principal: Principal,
        role: Role,
        *,
        name: str,
        email: str,
        password: str,
    ) -> User:
        if principal.company_id is None:
            raise Forbidden("Staff can only be created inside a company")

        user = await self.credentials.create_user(
            name=name,
            email=email,
            password=password,
            role=role,
            company_id=principal.company_id,
        )
        await self.events.append(
            stream_id=f"user:{user.id}",
            event_type=USER_CREATED,
            data={
                "user_id": str(user.id),
                "role": role.value,
                "company_id": str(principal.company_id),
            },
            actor_id=str(principal.user_id),
        )
        logger.info(
            "user.created",
            user_id=str(user.id),
            role=role.value,
            company_id=str(principal.company_id),
        )
        return user
