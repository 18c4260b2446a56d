"""Authorization policy — role predicates, permission table, tenant rule.

Learn: Every authorization decision in the codebase comes from this
module. Roles are a closed enum and each one has an explicit row in
PERMISSIONS; the table is checked for completeness at import, so adding
a role without deciding its permissions fails fast instead of silently
denying (or allowing) everything.

The tenant rule for cross-entity operations:
    allowed  ⇔  superadmin
             or (companyadmin and principal.company_id == target company)

The predicate alone is not isolation. Every list endpoint must also
scope its query by company_id (see scope_company_id); a check on one
record does nothing for an unscoped SELECT.
"""

import enum
import uuid
from dataclasses import dataclass
from typing import Optional

import structlog

from peoplehub.db.models import Role
from peoplehub.errors import Forbidden

logger = structlog.get_logger()


@dataclass(frozen=True)
class Principal:
    """The authenticated identity attached to a request."""

    user_id: uuid.UUID
    role: Role
    company_id: Optional[uuid.UUID] = None


class Permission(str, enum.Enum):
    VIEW_COMPANIES = "companies:view"
    MANAGE_COMPANIES = "companies:manage"
    VIEW_USERS = "users:view"
    MANAGE_USERS = "users:manage"
    VIEW_EMPLOYEES = "employees:view"
    MANAGE_EMPLOYEES = "employees:manage"
    VIEW_SERVICE_MANAGERS = "service_managers:view"
    MANAGE_SERVICE_MANAGERS = "service_managers:manage"
    FILE_LEAVES = "leaves:file"
    VIEW_LEAVES = "leaves:view"
    DECIDE_LEAVES = "leaves:decide"


PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.SUPERADMIN: frozenset({
        Permission.VIEW_COMPANIES,
        Permission.MANAGE_COMPANIES,
        Permission.VIEW_USERS,
        Permission.MANAGE_USERS,
        Permission.VIEW_EMPLOYEES,
        Permission.MANAGE_EMPLOYEES,
    }),
    Role.COMPANY_ADMIN: frozenset({
        Permission.VIEW_USERS,
        Permission.MANAGE_USERS,
        Permission.VIEW_EMPLOYEES,
        Permission.MANAGE_EMPLOYEES,
        Permission.VIEW_SERVICE_MANAGERS,
        Permission.MANAGE_SERVICE_MANAGERS,
        Permission.VIEW_LEAVES,
        Permission.DECIDE_LEAVES,
    }),
    Role.SERVICE_MANAGER: frozenset({
        Permission.VIEW_EMPLOYEES,
        Permission.VIEW_LEAVES,
    }),
    Role.EMPLOYEE: frozenset({
        Permission.VIEW_EMPLOYEES,
        Permission.FILE_LEAVES,
        Permission.VIEW_LEAVES,
    }),
}

_missing = set(Role) - set(PERMISSIONS)
if _missing:
    raise RuntimeError(f"Roles without a permission row: {sorted(r.value for r in _missing)}")


# ─── Role predicates ────────────────────────────────────


def is_superadmin(principal: Principal) -> bool:
    return principal.role is Role.SUPERADMIN


def is_company_admin(principal: Principal) -> bool:
    return principal.role is Role.COMPANY_ADMIN


def is_service_manager(principal: Principal) -> bool:
    return principal.role is Role.SERVICE_MANAGER


def is_employee(principal: Principal) -> bool:
    return principal.role is Role.EMPLOYEE


# ─── Decisions ──────────────────────────────────────────


def has_permission(principal: Principal, permission: Permission) -> bool:
    return permission in PERMISSIONS[principal.role]


def can_access_tenant(principal: Principal, company_id: Optional[uuid.UUID]) -> bool:
    """Tenant rule for operations on a record owned by company_id."""
    if is_superadmin(principal):
        return True
    if is_company_admin(principal):
        return company_id is not None and principal.company_id == company_id
    return False


def ensure_permission(principal: Principal, permission: Permission) -> None:
    if not has_permission(principal, permission):
        _deny("permission_denied", principal, permission=permission.value)
        raise Forbidden(f"Forbidden: {permission.value} required")


def ensure_tenant_access(principal: Principal, company_id: Optional[uuid.UUID]) -> None:
    if not can_access_tenant(principal, company_id):
        _deny("tenant_mismatch", principal, target_company_id=company_id)
        raise Forbidden("Forbidden: record belongs to another company")


def scope_company_id(principal: Principal) -> Optional[uuid.UUID]:
    """Company filter to apply to list queries.

    None means unscoped and is only ever returned for the superadmin.
    Any other principal without a company has nothing to list.
    """
    if is_superadmin(principal):
        return None
    if principal.company_id is None:
        _deny("no_tenant", principal)
        raise Forbidden("Forbidden: no company bound to this account")
    return principal.company_id


def _deny(reason: str, principal: Principal, **context) -> None:
    logger.warning(
        "authz.denied",
        reason=reason,
        user_id=str(principal.user_id),
        role=principal.role.value,
        company_id=str(principal.company_id) if principal.company_id else None,
        **{k: str(v) if isinstance(v, uuid.UUID) else v for k, v in context.items()},
    )
