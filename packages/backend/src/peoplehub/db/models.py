"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror these models.

Key concepts:
- UUID primary keys via the portable Uuid type (native on Postgres, CHAR on sqlite)
- Roles and statuses are closed enums stored by value
- Python-side timestamp defaults so objects are usable right after flush
  without a refresh round-trip (no lazy loads in async code)
- Ownership: users belong to a company; a company's admin_id is only a
  back-reference into users, never an ownership edge
"""

import enum
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


# ══════════════════════════════════════════════════════════════
# Closed vocabularies
# ══════════════════════════════════════════════════════════════


class Role(str, enum.Enum):
    SUPERADMIN = "superadmin"
    COMPANY_ADMIN = "companyadmin"
    SERVICE_MANAGER = "servicemanager"
    EMPLOYEE = "employee"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class CompanyStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def _enum_column(enum_cls: type[enum.Enum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


# ══════════════════════════════════════════════════════════════
# Tenants and credentials
# ══════════════════════════════════════════════════════════════


class Company(Base):
    """Tenant root. Everything except the superadmin is scoped to one.

    Learn: Created pending with an invitation token. Becomes active exactly
    once, when the token is redeemed and the first admin is bound. After
    that a superadmin may toggle active/inactive; nothing leads back to
    pending.
    """

    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    logo: Mapped[str] = mapped_column(String(500), nullable=False)
    admin_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", use_alter=True, name="fk_companies_admin_id"),
        nullable=True,
    )
    status: Mapped[CompanyStatus] = mapped_column(
        _enum_column(CompanyStatus), nullable=False, default=CompanyStatus.PENDING
    )
    invitation_token: Mapped[Optional[str]] = mapped_column(
        String(128), unique=True, nullable=True
    )
    invitation_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class User(Base):
    """A human login. Email is unique across all tenants.

    Learn: password_hash is only ever written by CredentialStore, which
    hashes internally. Nothing else in the codebase builds a hash.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_company", "company_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(_enum_column(Role), nullable=False)
    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("companies.id"), nullable=True
    )  # required for every role except superadmin
    status: Mapped[UserStatus] = mapped_column(
        _enum_column(UserStatus), nullable=False, default=UserStatus.ACTIVE
    )
    reset_token: Mapped[Optional[str]] = mapped_column(
        String(128), unique=True, nullable=True
    )
    reset_token_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


# ══════════════════════════════════════════════════════════════
# Staff profiles (thin consumers of the gate)
# ══════════════════════════════════════════════════════════════


class Employee(Base):
    """HR profile for a user with role=employee."""

    __tablename__ = "employees"
    __table_args__ = (
        Index("idx_employees_company", "company_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True, nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id"), nullable=False
    )
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    designation: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    user: Mapped["User"] = relationship(lazy="joined")


class ServiceManager(Base):
    """HR profile for a user with role=servicemanager."""

    __tablename__ = "service_managers"
    __table_args__ = (
        Index("idx_service_managers_company", "company_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True, nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id"), nullable=False
    )
    department: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    user: Mapped["User"] = relationship(lazy="joined")


# ══════════════════════════════════════════════════════════════
# Leave requests
# ══════════════════════════════════════════════════════════════


class Leave(Base):
    """A leave request filed by an employee.

    Learn: company_id is copied from the employee when the request is
    filed, so company-wide listings and the tenant check on a decision
    never have to join through employees. A request is decided once:
    pending → approved | rejected.
    """

    __tablename__ = "leaves"
    __table_args__ = (
        Index("idx_leaves_company", "company_id"),
        Index("idx_leaves_employee", "employee_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[LeaveStatus] = mapped_column(
        _enum_column(LeaveStatus), nullable=False, default=LeaveStatus.PENDING
    )
    decided_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    employee: Mapped["Employee"] = relationship(lazy="joined")


# ══════════════════════════════════════════════════════════════
# Audit trail
# ══════════════════════════════════════════════════════════════


class Event(Base):
    """Append-only audit log of identity state changes.

    stream_id examples: "company:<uuid>", "user:<uuid>"
    type examples: "company.activated", "password_reset.completed"
    Payloads never carry passwords, hashes, or tokens.
    """

    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_stream", "stream_id", "id"),
        Index("idx_events_type", "type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stream_id: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    meta: Mapped[dict] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )  # actor_id
    # Note: Python attr is "meta" because "metadata" is reserved by SQLAlchemy.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
