"""LeaveStore — persistence for leave requests.

Learn: A decision is a conditional UPDATE on status = 'pending', the same
shape as the token claims. Two admins approving and rejecting the same
request at once cannot both win; the second UPDATE matches no row.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.db.models import Employee, Leave, LeaveStatus


class LeaveStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self,
        *,
        employee: Employee,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> Leave:
        leave = Leave(
            employee=employee,
            company_id=employee.company_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
        )
        self.db.add(leave)
        await self.db.flush()
        return leave

    async def get(self, leave_id: uuid.UUID, *, refresh: bool = False) -> Optional[Leave]:
        q = select(Leave).where(Leave.id == leave_id)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def list_leaves(
        self,
        *,
        company_id: Optional[uuid.UUID] = None,
        employee_id: Optional[uuid.UUID] = None,
    ) -> list[Leave]:
        q = select(Leave)
        if company_id is not None:
            q = q.where(Leave.company_id == company_id)
        if employee_id is not None:
            q = q.where(Leave.employee_id == employee_id)
        result = await self.db.execute(q.order_by(Leave.created_at))
        return list(result.scalars().all())

    async def decide(
        self, leave_id: uuid.UUID, status: LeaveStatus, decided_by: uuid.UUID
    ) -> bool:
        """Move a pending request to approved/rejected. False if it was not pending."""
        result = await self.db.execute(
            update(Leave)
            .where(Leave.id == leave_id, Leave.status == LeaveStatus.PENDING)
            .values(status=status, decided_by=decided_by)
            .returning(Leave.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalars().first() is not None
