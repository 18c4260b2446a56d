"""TenantStore — the only owner of Company records.

Learn: The invitation claim is the heart of tenant activation:

    UPDATE companies SET status='active', invitation_token=NULL, ...
    WHERE invitation_token = :token
      AND invitation_expires_at > :now
      AND status = 'pending'
    RETURNING id

It runs inside the same transaction that then creates the admin user
and binds admin_id. A concurrent claim of the same token blocks on the
row lock and re-checks the WHERE after the winner commits; by then the
token is NULL, so it gets nothing back. If the winner rolls back (say,
its admin email was taken), the token is live again.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.db.models import Company, CompanyStatus, utcnow
from peoplehub.errors import AlreadyExists


class TenantStore:
    """Persistence for companies and their invitation tokens."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_company(
        self,
        *,
        name: str,
        logo: str,
        invitation_token: str,
        invitation_expires_at: datetime,
    ) -> Company:
        if await self.get_by_name(name):
            raise AlreadyExists("Company already exists")

        company = Company(
            name=name,
            logo=logo,
            status=CompanyStatus.PENDING,
            invitation_token=invitation_token,
            invitation_expires_at=invitation_expires_at,
        )
        self.db.add(company)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise AlreadyExists("Company already exists")
        return company

    async def get(self, company_id: uuid.UUID) -> Optional[Company]:
        return await self.db.get(Company, company_id)

    async def get_by_name(self, name: str) -> Optional[Company]:
        result = await self.db.execute(select(Company).where(Company.name == name))
        return result.scalars().first()

    async def list_companies(self) -> list[Company]:
        result = await self.db.execute(select(Company).order_by(Company.name))
        return list(result.scalars().all())

    async def claim_invitation(
        self, token: str, now: Optional[datetime] = None
    ) -> Optional[uuid.UUID]:
        """Atomically consume a live invitation and mark the company active.

        Returns the company id, or None if the token is unknown, already
        redeemed, or expired.
        """
        now = now or utcnow()
        result = await self.db.execute(
            update(Company)
            .where(
                Company.invitation_token == token,
                Company.invitation_expires_at > now,
                Company.status == CompanyStatus.PENDING,
            )
            .values(
                status=CompanyStatus.ACTIVE,
                invitation_token=None,
                invitation_expires_at=None,
            )
            .returning(Company.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalars().first()

    async def bind_admin(self, company_id: uuid.UUID, admin_id: uuid.UUID) -> None:
        await self.db.execute(
            update(Company)
            .where(Company.id == company_id)
            .values(admin_id=admin_id)
            .execution_options(synchronize_session=False)
        )

    async def set_status(self, company: Company, status: CompanyStatus) -> None:
        company.status = status
        await self.db.flush()
