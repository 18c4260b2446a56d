"""Company service — invitation-based tenant activation and tenant admin.

Learn: A company's life:

    create_company ──► pending (invitation token, 24h)
                          │  accept_invitation (exactly one winner)
                          ▼
                        active ◄──► inactive   (superadmin toggle)

accept_invitation runs as ONE transaction:
1. TenantStore.claim_invitation — conditional UPDATE, flips to active
   and clears the token, or returns nothing
2. CredentialStore.create_user — the first companyadmin
3. TenantStore.bind_admin — back-reference from company to admin
4. audit events, commit

If step 2 fails (email taken) the whole transaction rolls back and the
invitation stays redeemable. If two requests race on one token, the
second's UPDATE matches nothing and it fails with InvalidOrExpiredToken.
"""

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.policy import (
    Permission,
    Principal,
    ensure_permission,
    ensure_tenant_access,
)
from peoplehub.auth.tokens import expiry_from_now, new_opaque_token
from peoplehub.config import settings
from peoplehub.db.models import Company, CompanyStatus, Role, User
from peoplehub.errors import (
    AlreadyExists,
    InvalidOrExpiredToken,
    InvalidStateTransition,
    NotFound,
)
from peoplehub.events.store import EventStore
from peoplehub.events.types import (
    COMPANY_ACTIVATED,
    COMPANY_CREATED,
    COMPANY_STATUS_CHANGED,
    USER_CREATED,
)
from peoplehub.services.mailer import MailMessage, invitation_message
from peoplehub.stores.credentials import CredentialStore
from peoplehub.stores.tenants import TenantStore

logger = structlog.get_logger()


@dataclass
class Activation:
    company: Company
    admin: User


class CompanyService:
    """Business logic for companies and their invitations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tenants = TenantStore(db)
        self.credentials = CredentialStore(db)
        self.events = EventStore(db)

    # ─── Invitation ─────────────────────────────────────

    async def create_company(
        self,
        principal: Principal,
        *,
        name: str,
        logo: str,
        admin_email: str,
    ) -> tuple[Company, MailMessage]:
        """Create a pending company and the invitation mail for its admin.

        No user is created here; the admin account only comes into
        existence when the invitation is accepted.
        """
        ensure_permission(principal, Permission.MANAGE_COMPANIES)

        token = new_opaque_token()
        company = await self.tenants.create_company(
            name=name,
            logo=logo,
            invitation_token=token,
            invitation_expires_at=expiry_from_now(hours=settings.invitation_expire_hours),
        )
        await self.events.append(
            stream_id=f"company:{company.id}",
            event_type=COMPANY_CREATED,
            data={"company_id": str(company.id), "name": name, "invited": admin_email},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()

        logger.info("company.created", company_id=str(company.id), invited=admin_email)
        return company, invitation_message(admin_email, company.name, token)

    async def accept_invitation(
        self,
        *,
        token: str,
        name: str,
        email: str,
        password: str,
    ) -> Activation:
        company_id = await self.tenants.claim_invitation(token)
        if company_id is None:
            await self.db.rollback()
            logger.info("company.invitation_rejected")
            raise InvalidOrExpiredToken()

        try:
            admin = await self.credentials.create_user(
                name=name,
                email=email,
                password=password,
                role=Role.COMPANY_ADMIN,
                company_id=company_id,
            )
        except AlreadyExists:
            # un-claims the invitation
            await self.db.rollback()
            raise
        await self.tenants.bind_admin(company_id, admin.id)

        await self.events.append(
            stream_id=f"user:{admin.id}",
            event_type=USER_CREATED,
            data={
                "user_id": str(admin.id),
                "role": Role.COMPANY_ADMIN.value,
                "company_id": str(company_id),
            },
        )
        await self.events.append(
            stream_id=f"company:{company_id}",
            event_type=COMPANY_ACTIVATED,
            data={"company_id": str(company_id), "admin_id": str(admin.id)},
            actor_id=str(admin.id),
        )
        await self.db.commit()

        company = await self.tenants.get(company_id)
        await self.db.refresh(company)

        logger.info(
            "company.activated", company_id=str(company_id), admin_id=str(admin.id)
        )
        return Activation(company=company, admin=admin)

    # ─── Administration ─────────────────────────────────

    async def list_companies(self, principal: Principal) -> list[Company]:
        ensure_permission(principal, Permission.VIEW_COMPANIES)
        return await self.tenants.list_companies()

    async def get_company(self, principal: Principal, company_id: uuid.UUID) -> Company:
        company = await self.tenants.get(company_id)
        if not company:
            raise NotFound("Company not found")
        ensure_tenant_access(principal, company.id)
        return company

    async def set_status(
        self,
        principal: Principal,
        company_id: uuid.UUID,
        status: CompanyStatus,
    ) -> Company:
        """Toggle an activated company between active and inactive."""
        ensure_permission(principal, Permission.MANAGE_COMPANIES)

        company = await self.tenants.get(company_id)
        if not company:
            raise NotFound("Company not found")
        if status is CompanyStatus.PENDING:
            raise InvalidStateTransition("A company cannot return to pending")
        if company.status is CompanyStatus.PENDING:
            raise InvalidStateTransition(
                "A pending company is activated only by accepting its invitation"
            )

        previous = company.status
        await self.tenants.set_status(company, status)
        await self.events.append(
            stream_id=f"company:{company.id}",
            event_type=COMPANY_STATUS_CHANGED,
            data={"from": previous.value, "to": status.value},
            actor_id=str(principal.user_id),
        )
        await self.db.commit()

        logger.info(
            "company.status_changed",
            company_id=str(company.id),
            status=status.value,
        )
        return company
