"""PeopleHub CLI — database setup, superadmin seed, and an API client.

Usage:
    peoplehub init-db                              # Create tables (dev only; use alembic in prod)
    peoplehub seed-superadmin                      # Idempotent superadmin seed
    peoplehub login admin@acme.com                 # Prompt for password, print a session token
    peoplehub invite "Acme" logo.png a@acme.com    # Create a pending company + send invitation
    peoplehub companies                            # List companies

API commands read PEOPLEHUB_API_URL and PEOPLEHUB_TOKEN (or --token).
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("PEOPLEHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the PeopleHub backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when a loop is already running (e.g. CliRunner
    inside async tests).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("PEOPLEHUB_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set PEOPLEHUB_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _fail(r: httpx.Response) -> None:
    """Print the API error payload and exit non-zero."""
    try:
        payload = r.json()
        detail = payload.get("detail", r.text)
        code = payload.get("code", r.status_code)
    except ValueError:
        detail, code = r.text, r.status_code
    click.secho(f"Error [{code}]: {detail}", fg="red", err=True)
    sys.exit(1)


def _status_color(status: str) -> str:
    return {"active": "green", "pending": "yellow", "inactive": "red"}.get(status, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="peoplehub")
def main():
    """PeopleHub — multi-tenant HR platform administration."""


# ---------------------------------------------------------------------------
# Local commands (talk to the database directly)
# ---------------------------------------------------------------------------


@main.command("init-db")
def init_db():
    """Create all tables from the ORM models."""
    _run(_init_db_impl())
    click.secho("Tables created.", fg="green")


async def _init_db_impl():
    from peoplehub.db.engine import engine
    from peoplehub.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@main.command("seed-superadmin")
@click.option("--email", help="Superadmin email (default: PEOPLEHUB_SUPERADMIN_EMAIL)")
@click.option("--name", help="Display name (default: PEOPLEHUB_SUPERADMIN_NAME)")
@click.option("--password", help="Password (default: PEOPLEHUB_SUPERADMIN_PASSWORD)")
def seed_superadmin_cmd(email: Optional[str], name: Optional[str], password: Optional[str]):
    """Create the platform superadmin if it does not exist yet."""
    user, created = _run(_seed_impl(email, name, password))
    if user is None:
        click.secho("Skipped: no superadmin password configured.", fg="yellow")
    elif created:
        click.secho(f"Superadmin created: {user.email} ({user.id})", fg="green")
    else:
        click.echo(f"Superadmin already exists: {user.email}")


async def _seed_impl(email, name, password):
    from peoplehub.db.engine import async_session_factory, engine
    from peoplehub.services.bootstrap import seed_superadmin

    try:
        return await seed_superadmin(
            async_session_factory, email=email, name=name, password=password
        )
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# API commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in and print a session token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/api/v1/auth/login", json={"email": email, "password": password})
        if r.status_code != 200:
            _fail(r)
        data = r.json()
        click.secho(f"Logged in as {data['name']} ({data['role']})", fg="green", err=True)
        click.echo(data["token"])


@main.command()
@click.argument("name")
@click.argument("logo")
@click.argument("admin_email")
@click.option("--token", help="Superadmin session token (or set PEOPLEHUB_TOKEN)")
def invite(name: str, logo: str, admin_email: str, token: Optional[str]):
    """Create a pending company and email an invitation to ADMIN_EMAIL."""
    _run(_invite_impl(name, logo, admin_email, _require_token(token)))


async def _invite_impl(name: str, logo: str, admin_email: str, token: str):
    async with _client(token) as c:
        r = await c.post(
            "/api/v1/companies",
            json={"name": name, "logo": logo, "admin_email": admin_email},
        )
        if r.status_code != 201:
            _fail(r)
        company = r.json()
        click.secho(f"Company {company['name']} created ({company['id']})", fg="green")
        click.echo(f"Invitation sent to {admin_email}; expires {company['invitation_expires_at']}")


@main.command()
@click.option("--token", help="Superadmin session token (or set PEOPLEHUB_TOKEN)")
def companies(token: Optional[str]):
    """List all companies."""
    _run(_companies_impl(_require_token(token)))


async def _companies_impl(token: str):
    async with _client(token) as c:
        r = await c.get("/api/v1/companies")
        if r.status_code != 200:
            _fail(r)
        rows = r.json()

    if not rows:
        click.echo("No companies found.")
        return

    click.secho(f"Companies ({len(rows)}):", bold=True)
    click.echo()
    for co in rows:
        status_str = click.style(co["status"], fg=_status_color(co["status"]))
        click.echo(
            f"  {co['id'][:8]}  {co['name']:30s}  {status_str:20s}  "
            f"admin={co.get('admin_id') or '—'}"
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
