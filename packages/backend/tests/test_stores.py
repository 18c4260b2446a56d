"""CredentialStore and TenantStore tests — hashing, uniqueness, conditional updates."""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select

from peoplehub.auth.password import verify_password
from peoplehub.auth.tokens import new_opaque_token
from peoplehub.db.models import Company, CompanyStatus, Role, User, utcnow
from peoplehub.errors import AlreadyExists
from peoplehub.stores.credentials import CredentialStore
from peoplehub.stores.tenants import TenantStore


async def _company(db, name="Acme", expires_in=timedelta(hours=24)) -> tuple[Company, str]:
    token = new_opaque_token()
    company = await TenantStore(db).create_company(
        name=name,
        logo="logo.png",
        invitation_token=token,
        invitation_expires_at=utcnow() + expires_in,
    )
    await db.commit()
    return company, token


# ─── CredentialStore ────────────────────────────────────


@pytest.mark.asyncio
async def test_password_is_hashed_exactly_once(db_session):
    company, _ = await _company(db_session)
    user = await CredentialStore(db_session).create_user(
        name="Ann",
        email="ann@acme.test",
        password="plain-password",
        role=Role.EMPLOYEE,
        company_id=company.id,
    )
    assert user.password_hash != "plain-password"
    assert verify_password("plain-password", user.password_hash)


@pytest.mark.asyncio
async def test_email_is_normalized_and_unique(db_session):
    store = CredentialStore(db_session)
    await store.create_user(
        name="Root", email="  Root@PeopleHub.test ", password="pw-123456", role=Role.SUPERADMIN
    )
    await db_session.commit()

    assert (await store.get_by_email("root@peoplehub.test")).name == "Root"
    with pytest.raises(AlreadyExists):
        await store.create_user(
            name="Root 2", email="ROOT@peoplehub.test", password="pw-654321", role=Role.SUPERADMIN
        )


@pytest.mark.asyncio
async def test_role_company_invariant(db_session):
    store = CredentialStore(db_session)
    with pytest.raises(ValueError):
        await store.create_user(
            name="Orphan", email="orphan@x.test", password="pw-123456", role=Role.EMPLOYEE
        )
    with pytest.raises(ValueError):
        await store.create_user(
            name="Root",
            email="root@x.test",
            password="pw-123456",
            role=Role.SUPERADMIN,
            company_id=uuid.uuid4(),
        )


@pytest.mark.asyncio
async def test_check_password_for_missing_user_is_false(db_session):
    assert CredentialStore.check_password(None, "anything") is False


@pytest.mark.asyncio
async def test_redeem_reset_token_clears_token(db_session):
    store = CredentialStore(db_session)
    user = await store.create_user(
        name="Root", email="root@x.test", password="old-password", role=Role.SUPERADMIN
    )
    token = new_opaque_token()
    await store.set_reset_token(user.id, token, utcnow() + timedelta(minutes=60))
    await db_session.commit()

    assert await store.redeem_reset_token(token, "new-password") == user.id
    await db_session.commit()
    assert await store.redeem_reset_token(token, "newer-password") is None

    await db_session.refresh(user)
    assert user.reset_token is None
    assert user.reset_token_expires_at is None
    assert verify_password("new-password", user.password_hash)


@pytest.mark.asyncio
async def test_redeem_respects_expiry(db_session):
    store = CredentialStore(db_session)
    user = await store.create_user(
        name="Root", email="root@x.test", password="old-password", role=Role.SUPERADMIN
    )
    token = new_opaque_token()
    await store.set_reset_token(user.id, token, utcnow() + timedelta(minutes=60))
    await db_session.commit()

    later = utcnow() + timedelta(minutes=61)
    assert await store.redeem_reset_token(token, "new-password", now=later) is None


# ─── TenantStore ────────────────────────────────────────


@pytest.mark.asyncio
async def test_claim_invitation_once(db_session):
    company, token = await _company(db_session)
    tenants = TenantStore(db_session)

    assert await tenants.claim_invitation(token) == company.id
    await db_session.commit()
    assert await tenants.claim_invitation(token) is None

    row = (
        await db_session.execute(
            select(Company.status, Company.invitation_token).where(Company.id == company.id)
        )
    ).one()
    assert row.status == CompanyStatus.ACTIVE
    assert row.invitation_token is None


@pytest.mark.asyncio
async def test_claim_invitation_respects_expiry(db_session):
    _, token = await _company(db_session, expires_in=timedelta(seconds=-1))
    assert await TenantStore(db_session).claim_invitation(token) is None


@pytest.mark.asyncio
async def test_duplicate_company_name(db_session):
    await _company(db_session, name="Acme")
    with pytest.raises(AlreadyExists):
        await _company(db_session, name="Acme")


@pytest.mark.asyncio
async def test_bind_admin(db_session):
    company, token = await _company(db_session)
    tenants = TenantStore(db_session)
    await tenants.claim_invitation(token)
    admin = await CredentialStore(db_session).create_user(
        name="Boss",
        email="boss@acme.test",
        password="boss-password",
        role=Role.COMPANY_ADMIN,
        company_id=company.id,
    )
    await tenants.bind_admin(company.id, admin.id)
    await db_session.commit()

    admin_id = await db_session.scalar(select(Company.admin_id).where(Company.id == company.id))
    assert admin_id == admin.id
    assert (await db_session.get(User, admin.id)).company_id == company.id
