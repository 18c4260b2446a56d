"""Staff profile persistence (employees and service managers)."""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.db.models import Employee, ServiceManager, User


class StaffStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_employee(
        self,
        *,
        user: User,
        department: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Employee:
        employee = Employee(
            user=user,
            company_id=user.company_id,
            department=department,
            designation=designation,
        )
        self.db.add(employee)
        await self.db.flush()
        return employee

    async def get_employee(self, employee_id: uuid.UUID) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee).where(Employee.id == employee_id)
        )
        return result.scalars().first()

    async def get_employee_by_user(self, user_id: uuid.UUID) -> Optional[Employee]:
        result = await self.db.execute(
            select(Employee).where(Employee.user_id == user_id)
        )
        return result.scalars().first()

    async def list_employees(
        self, company_id: Optional[uuid.UUID] = None
    ) -> list[Employee]:
        q = select(Employee)
        if company_id is not None:
            q = q.where(Employee.company_id == company_id)
        result = await self.db.execute(q.order_by(Employee.created_at))
        return list(result.scalars().all())

    async def add_service_manager(
        self,
        *,
        user: User,
        department: Optional[str] = None,
    ) -> ServiceManager:
        manager = ServiceManager(
            user=user,
            company_id=user.company_id,
            department=department,
        )
        self.db.add(manager)
        await self.db.flush()
        return manager

    async def list_service_managers(self, company_id: uuid.UUID) -> list[ServiceManager]:
        result = await self.db.execute(
            select(ServiceManager)
            .where(ServiceManager.company_id == company_id)
            .order_by(ServiceManager.created_at)
        )
        return list(result.scalars().all())
