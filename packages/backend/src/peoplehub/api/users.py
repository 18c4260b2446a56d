"""User API — tenant-scoped listing, status toggle, password change."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.dependencies import get_current_principal
from peoplehub.auth.policy import Principal
from peoplehub.db.engine import get_db
from peoplehub.db.models import UserStatus
from peoplehub.schemas.auth import ChangePasswordRequest, MessageResponse
from peoplehub.schemas.user import UserRead, UserStatusUpdate
from peoplehub.services.auth_service import AuthService
from peoplehub.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserRead])
async def list_users(
    company_id: Optional[uuid.UUID] = None,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(_svc),
):
    return await svc.list_users(principal, company_id)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(_svc),
):
    return await svc.get_user(principal, user_id)


@router.patch("/{user_id}/status", response_model=UserRead)
async def update_user_status(
    user_id: uuid.UUID,
    body: UserStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: UserService = Depends(_svc),
):
    return await svc.set_status(principal, user_id, UserStatus(body.status))


@router.put("/{user_id}/password", response_model=MessageResponse)
async def change_password(
    user_id: uuid.UUID,
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Change your own password."""
    await AuthService(db).change_password(
        principal, user_id, body.current_password, body.new_password
    )
    return MessageResponse(message="Password changed successfully")
