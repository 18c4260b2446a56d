"""Employee and service-manager API.

Learn: Every list here is company-scoped in the query itself
(StaffService → scope_company_id), not filtered after the fact.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.dependencies import get_current_principal
from peoplehub.auth.policy import Principal
from peoplehub.db.engine import get_db
from peoplehub.db.models import UserStatus
from peoplehub.schemas.staff import (
    EmployeeCreate,
    EmployeeRead,
    ServiceManagerRead,
    StaffCreate,
)
from peoplehub.schemas.user import UserStatusUpdate
from peoplehub.services.staff_service import StaffService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> StaffService:
    return StaffService(db)


# ─── Employees ──────────────────────────────────────────

@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    principal: Principal = Depends(get_current_principal),
    svc: StaffService = Depends(_svc),
):
    return await svc.create_employee(
        principal,
        name=body.name,
        email=body.email,
        password=body.password,
        department=body.department,
        designation=body.designation,
    )


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    principal: Principal = Depends(get_current_principal),
    svc: StaffService = Depends(_svc),
):
    return await svc.list_employees(principal)


@router.patch("/employees/{employee_id}/status", response_model=EmployeeRead)
async def update_employee_status(
    employee_id: uuid.UUID,
    body: UserStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: StaffService = Depends(_svc),
):
    return await svc.set_employee_status(
        principal, employee_id, UserStatus(body.status)
    )


# ─── Service managers ───────────────────────────────────

@router.post("/service-managers", response_model=ServiceManagerRead, status_code=201)
async def create_service_manager(
    body: StaffCreate,
    principal: Principal = Depends(get_current_principal),
    svc: StaffService = Depends(_svc),
):
    return await svc.create_service_manager(
        principal,
        name=body.name,
        email=body.email,
        password=body.password,
        department=body.department,
    )


@router.get("/service-managers", response_model=list[ServiceManagerRead])
async def list_service_managers(
    principal: Principal = Depends(get_current_principal),
    svc: StaffService = Depends(_svc),
):
    return await svc.list_service_managers(principal)
