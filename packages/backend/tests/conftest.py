"""Test fixtures — a fresh sqlite database per test, real sessions per request.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Env vars are set BEFORE anything from peoplehub is imported, because
   Settings() is built at import time and refuses to start without a
   signing secret.
2. Each test gets its own file-backed sqlite database (aiosqlite) with the
   schema created from the ORM models, and is thrown away afterwards.
3. get_db is overridden to open a NEW session per request, exactly like
   production. Two concurrent requests really are two transactions, so
   the one-winner token tests exercise the conditional UPDATEs for real.
4. get_mailer is overridden with a RecordingMailer; tests read invitation
   and reset links out of the recorded messages.
"""

import os

os.environ["PEOPLEHUB_JWT_SECRET"] = "test-signing-secret-not-for-production"
os.environ["PEOPLEHUB_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["PEOPLEHUB_BCRYPT_ROUNDS"] = "4"
os.environ["PEOPLEHUB_SEED_SUPERADMIN_ON_STARTUP"] = "false"
os.environ["PEOPLEHUB_SMTP_HOST"] = ""
os.environ["PEOPLEHUB_SUPERADMIN_PASSWORD"] = ""

import re  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from typing import Optional  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from peoplehub.db.engine import get_db  # noqa: E402
from peoplehub.db.models import Base, Role  # noqa: E402
from peoplehub.main import app  # noqa: E402
from peoplehub.services.mailer import MailMessage, Mailer, get_mailer  # noqa: E402
from peoplehub.stores.credentials import CredentialStore  # noqa: E402

SUPERADMIN_EMAIL = "root@peoplehub.test"
SUPERADMIN_PASSWORD = "root-password-123"

_TOKEN_IN_LINK = re.compile(r"/(?:accept-invitation|reset-password)/([0-9a-f]+)")


class RecordingMailer(Mailer):
    """Mailer that keeps messages in memory instead of talking SMTP.

    With fail=True every send is still recorded and then raises, like an
    SMTP server that drops the connection after the DATA command.
    """

    def __init__(self):
        super().__init__(smtp_host="", from_addr="test@peoplehub.test", use_tls=False)
        self.sent: list[MailMessage] = []
        self.fail = False

    def send(self, message: MailMessage) -> None:
        self.sent.append(message)
        if self.fail:
            raise ConnectionResetError("smtp connection lost")

    def last_token(self, to: Optional[str] = None) -> str:
        """Token from the most recent invitation/reset link (optionally for one recipient)."""
        messages = [m for m in self.sent if to is None or m.to == to]
        assert messages, f"no mail sent to {to or 'anyone'}"
        match = _TOKEN_IN_LINK.search(messages[-1].body)
        assert match, "no redemption link in mail body"
        return match.group(1)


@dataclass
class Tenant:
    """An activated company plus the credentials of its first admin."""

    company_id: str
    admin_id: str
    admin_email: str
    admin_password: str
    admin_token: str


# ─── Database ───────────────────────────────────────────


@pytest_asyncio.fixture()
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'peoplehub.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ─── App ────────────────────────────────────────────────


@pytest_asyncio.fixture()
async def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture()
async def client(session_factory, mailer):
    """HTTP client with the app's get_db and get_mailer overridden for testing."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Identities ─────────────────────────────────────────


@pytest_asyncio.fixture()
async def superadmin(session_factory):
    """The platform superadmin, created straight through the CredentialStore."""
    async with session_factory() as session:
        user = await CredentialStore(session).create_user(
            name="Root",
            email=SUPERADMIN_EMAIL,
            password=SUPERADMIN_PASSWORD,
            role=Role.SUPERADMIN,
        )
        await session.commit()
        return user


@pytest_asyncio.fixture()
async def superadmin_token(client, superadmin):
    return await login(client, SUPERADMIN_EMAIL, SUPERADMIN_PASSWORD)


@pytest_asyncio.fixture()
async def tenant(client, mailer, superadmin_token):
    return await activate_company(client, mailer, superadmin_token, "Acme", "admin@acme.test")


@pytest_asyncio.fixture()
async def other_tenant(client, mailer, superadmin_token):
    return await activate_company(
        client, mailer, superadmin_token, "Globex", "admin@globex.test"
    )


# ─── Helpers ────────────────────────────────────────────


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def login(client: AsyncClient, email: str, password: str) -> str:
    r = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


async def invite_company(
    client: AsyncClient,
    mailer: RecordingMailer,
    superadmin_token: str,
    name: str,
    admin_email: str,
) -> tuple[dict, str]:
    """Create a pending company; returns (company json, invitation token)."""
    r = await client.post(
        "/api/v1/companies",
        json={"name": name, "logo": f"https://cdn.test/{name}.png", "admin_email": admin_email},
        headers=auth(superadmin_token),
    )
    assert r.status_code == 201, r.text
    return r.json(), mailer.last_token(admin_email)


async def activate_company(
    client: AsyncClient,
    mailer: RecordingMailer,
    superadmin_token: str,
    name: str,
    admin_email: str,
    admin_password: str = "admin-password-123",
) -> Tenant:
    company, token = await invite_company(client, mailer, superadmin_token, name, admin_email)
    r = await client.post(
        "/api/v1/companies/accept-invitation",
        json={
            "token": token,
            "name": f"{name} Admin",
            "email": admin_email,
            "password": admin_password,
        },
    )
    assert r.status_code == 201, r.text
    return Tenant(
        company_id=company["id"],
        admin_id=r.json()["user"]["id"],
        admin_email=admin_email,
        admin_password=admin_password,
        admin_token=await login(client, admin_email, admin_password),
    )


async def create_employee(
    client: AsyncClient,
    admin_token: str,
    email: str,
    password: str = "employee-password-1",
) -> dict:
    r = await client.post(
        "/api/v1/employees",
        json={
            "name": email.split("@")[0].title(),
            "email": email,
            "password": password,
            "department": "Engineering",
            "designation": "Developer",
        },
        headers=auth(admin_token),
    )
    assert r.status_code == 201, r.text
    return r.json()
