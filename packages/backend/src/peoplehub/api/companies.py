"""Company API — invitation issuance, acceptance, and tenant admin.

Learn: Two routers because they sit on different sides of the gate:
- `router` (protected): create/list/get companies, toggle status
- `invitations_router` (open): accept an invitation. The caller has no
  account yet; the invitation token itself is the credential.
"""

import uuid

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.dependencies import get_current_principal
from peoplehub.auth.policy import Principal
from peoplehub.db.engine import get_db
from peoplehub.db.models import CompanyStatus
from peoplehub.schemas.company import (
    AcceptInvitationRequest,
    ActivationResponse,
    CompanyCreate,
    CompanyRead,
    CompanyStatusUpdate,
)
from peoplehub.schemas.user import UserRead
from peoplehub.services.company_service import CompanyService
from peoplehub.services.mailer import Mailer, get_mailer

router = APIRouter(prefix="/companies")
invitations_router = APIRouter(prefix="/companies")


def _svc(db: AsyncSession = Depends(get_db)) -> CompanyService:
    return CompanyService(db)


# ─── Invitations ────────────────────────────────────────


@router.post("", response_model=CompanyRead, status_code=201)
async def create_company(
    body: CompanyCreate,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(get_current_principal),
    svc: CompanyService = Depends(_svc),
    mailer: Mailer = Depends(get_mailer),
):
    """Create a pending company and mail the invitation to its future admin."""
    company, message = await svc.create_company(
        principal,
        name=body.name,
        logo=body.logo,
        admin_email=body.admin_email,
    )
    background_tasks.add_task(mailer.deliver, message)
    return company


@invitations_router.post(
    "/accept-invitation", response_model=ActivationResponse, status_code=201
)
async def accept_invitation(
    body: AcceptInvitationRequest,
    svc: CompanyService = Depends(_svc),
):
    """Redeem an invitation: create the first admin and activate the company."""
    activation = await svc.accept_invitation(
        token=body.token,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return ActivationResponse(
        company=CompanyRead.model_validate(activation.company),
        user=UserRead.model_validate(activation.admin),
    )


# ─── Administration ─────────────────────────────────────


@router.get("", response_model=list[CompanyRead])
async def list_companies(
    principal: Principal = Depends(get_current_principal),
    svc: CompanyService = Depends(_svc),
):
    return await svc.list_companies(principal)


@router.get("/{company_id}", response_model=CompanyRead)
async def get_company(
    company_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    svc: CompanyService = Depends(_svc),
):
    return await svc.get_company(principal, company_id)


@router.patch("/{company_id}/status", response_model=CompanyRead)
async def update_company_status(
    company_id: uuid.UUID,
    body: CompanyStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    svc: CompanyService = Depends(_svc),
):
    """Toggle an activated company between active and inactive (superadmin)."""
    return await svc.set_status(principal, company_id, CompanyStatus(body.status))
