"""AuthorizationPolicy tests — the permission table and the tenant rule."""

import uuid

import pytest

from peoplehub.auth.policy import (
    PERMISSIONS,
    Permission,
    Principal,
    can_access_tenant,
    ensure_permission,
    ensure_tenant_access,
    has_permission,
    is_company_admin,
    is_employee,
    is_service_manager,
    is_superadmin,
    scope_company_id,
)
from peoplehub.db.models import Role
from peoplehub.errors import Forbidden

ACME = uuid.uuid4()
GLOBEX = uuid.uuid4()


def _principal(role: Role, company_id=ACME) -> Principal:
    if role is Role.SUPERADMIN:
        company_id = None
    return Principal(user_id=uuid.uuid4(), role=role, company_id=company_id)


def test_every_role_has_a_permission_row():
    assert set(PERMISSIONS) == set(Role)


@pytest.mark.parametrize(
    "role, predicate",
    [
        (Role.SUPERADMIN, is_superadmin),
        (Role.COMPANY_ADMIN, is_company_admin),
        (Role.SERVICE_MANAGER, is_service_manager),
        (Role.EMPLOYEE, is_employee),
    ],
)
def test_role_predicates_are_exclusive(role, predicate):
    principal = _principal(role)
    checks = [is_superadmin, is_company_admin, is_service_manager, is_employee]
    assert [check(principal) for check in checks].count(True) == 1
    assert predicate(principal)


def test_superadmin_manages_companies_not_service_managers():
    root = _principal(Role.SUPERADMIN)
    assert has_permission(root, Permission.MANAGE_COMPANIES)
    assert not has_permission(root, Permission.MANAGE_SERVICE_MANAGERS)


def test_companyadmin_cannot_touch_companies():
    admin = _principal(Role.COMPANY_ADMIN)
    assert not has_permission(admin, Permission.VIEW_COMPANIES)
    with pytest.raises(Forbidden):
        ensure_permission(admin, Permission.MANAGE_COMPANIES)


def test_service_manager_only_views():
    assert PERMISSIONS[Role.SERVICE_MANAGER] == frozenset(
        {Permission.VIEW_EMPLOYEES, Permission.VIEW_LEAVES}
    )


def test_employee_files_leaves_but_never_decides():
    employee = _principal(Role.EMPLOYEE)
    assert has_permission(employee, Permission.FILE_LEAVES)
    assert not has_permission(employee, Permission.DECIDE_LEAVES)
    assert not has_permission(employee, Permission.MANAGE_EMPLOYEES)


def test_only_companyadmin_decides_leaves():
    deciders = {role for role, perms in PERMISSIONS.items() if Permission.DECIDE_LEAVES in perms}
    assert deciders == {Role.COMPANY_ADMIN}


def test_tenant_rule():
    assert can_access_tenant(_principal(Role.SUPERADMIN), GLOBEX)
    assert can_access_tenant(_principal(Role.COMPANY_ADMIN), ACME)
    assert not can_access_tenant(_principal(Role.COMPANY_ADMIN), GLOBEX)
    assert not can_access_tenant(_principal(Role.COMPANY_ADMIN), None)
    assert not can_access_tenant(_principal(Role.SERVICE_MANAGER), ACME)
    assert not can_access_tenant(_principal(Role.EMPLOYEE), ACME)


def test_ensure_tenant_access_raises_forbidden():
    with pytest.raises(Forbidden) as exc:
        ensure_tenant_access(_principal(Role.COMPANY_ADMIN), GLOBEX)
    assert exc.value.status_code == 403


def test_scope_company_id():
    assert scope_company_id(_principal(Role.SUPERADMIN)) is None
    assert scope_company_id(_principal(Role.EMPLOYEE)) == ACME
    with pytest.raises(Forbidden):
        scope_company_id(_principal(Role.COMPANY_ADMIN, company_id=None))
