"""Leave service — employees file requests, their company admin decides.

Learn: Who sees what:

    employee        ──► only the requests on their own employee profile
    servicemanager  ──► every request in their company (read only)
    companyadmin    ──► every request in their company, and decides them

Deciding goes through ensure_tenant_access on the request's company_id,
so an admin of one company cannot approve a leave in another even with
a valid leave id in hand.
"""

import uuid
from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.policy import (
    Permission,
    Principal,
    ensure_permission,
    ensure_tenant_access,
    is_employee,
    scope_company_id,
)
from peoplehub.db.models import Employee, Leave, LeaveStatus
from peoplehub.errors import InvalidStateTransition, NotFound
from peoplehub.events.store import EventStore
from peoplehub.events.types import LEAVE_DECIDED, LEAVE_REQUESTED
from peoplehub.stores.leaves import LeaveStore
from peoplehub.stores.staff import StaffStore

logger = structlog.get_logger()


class LeaveService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.leaves = LeaveStore(db)
        self.staff = StaffStore(db)
        self.events = EventStore(db)

    async def file_leave(
        self,
        principal: Principal,
        *,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> Leave:
        ensure_permission(principal, Permission.FILE_LEAVES)
        employee = await self._own_profile(principal)

        leave = await self.leaves.add(
            employee=employee, start_date=start_date, end_date=end_date, reason=reason
        )
        await self.events.append(
            stream_id=f"leave:{leave.id}",
            event_type=LEAVE_REQUESTED,
            data={
                "leave_id": str(leave.id),
                "employee_id": str(employee.id),
                "company_id": str(employee.company_id),
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
            actor_id=str(principal.user_id),
        )
        await self.db.commit()

        logger.info("leave.requested", leave_id=str(leave.id), employee_id=str(employee.id))
        return leave

    async def list_leaves(self, principal: Principal) -> list[Leave]:
        ensure_permission(principal, Permission.VIEW_LEAVES)
        if is_employee(principal):
            employee = await self._own_profile(principal)
            return await self.leaves.list_leaves(employee_id=employee.id)
        return await self.leaves.list_leaves(company_id=scope_company_id(principal))

    async def decide(
        self,
        principal: Principal,
        leave_id: uuid.UUID,
        status: LeaveStatus,
    ) -> Leave:
        ensure_permission(principal, Permission.DECIDE_LEAVES)
        leave = await self.leaves.get(leave_id)
        if not leave:
            raise NotFound("Leave not found")
        ensure_tenant_access(principal, leave.company_id)

        if not await self.leaves.decide(leave.id, status, principal.user_id):
            raise InvalidStateTransition("Leave has already been decided")

        await self.events.append(
            stream_id=f"leave:{leave.id}",
            event_type=LEAVE_DECIDED,
            data={"from": LeaveStatus.PENDING.value, "to": status.value},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()

        logger.info("leave.decided", leave_id=str(leave.id), status=status.value)
        return await self.leaves.get(leave.id, refresh=True)

    async def _own_profile(self, principal: Principal) -> Employee:
        employee = await self.staff.get_employee_by_user(principal.user_id)
        if not employee:
            raise NotFound("Employee profile not found")
        return employee
