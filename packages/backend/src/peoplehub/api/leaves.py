"""Leave request API.

Learn: The company a leave belongs to is never taken from the request.
Filing reads it from the caller's employee profile; deciding checks it
against the caller's company.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.dependencies import get_current_principal
from peoplehub.auth.policy import Principal
from peoplehub.db.engine import get_db
from peoplehub.db.models import LeaveStatus
from peoplehub.schemas.leave import LeaveCreate, LeaveRead, LeaveStatusUpdate
from peoplehub.services.leave_service import LeaveService

router = APIRouter(prefix="/leaves")


def _svc(db: AsyncSession = Depends(get_db)) -> LeaveService:
    return LeaveService(db)


@router.post("", response_model=LeaveRead, status_code=201)
async def file_leave(
    body: LeaveCreate,
    principal: Principal = Depends(get_current_principal),
    svc: LeaveService = Depends(_svc),
):
    return await svc.file_leave(
        principal,
        start_date=body.start_date,
        end_date=body.end_date,
        reason=body.reason,
    )


@router.get("", response_model=list[LeaveRead])
async def list_leaves(
    principal: Principal = Depends(get_current_principal),
    svc: LeaveService = Depends(_svc),
):
    return await svc.list_leaves(principal)


@router.patch("/{leave_id}/status", response_model=LeaveRead)
async def decide_leave(
    leave_id: uuid.UUID,
    body: LeaveStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: LeaveService = Depends(_svc),
):
    return await svc.decide(principal, leave_id, LeaveStatus(body.status))
