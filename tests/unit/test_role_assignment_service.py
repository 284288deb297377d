"""Tests for RoleAssignmentService.change_user_role business rules."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services.role_assignment_service import RoleAssignmentService
from tenantdesk.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    RoleChangeException,
    ValidationException,
)
from tenantdesk.domain.roles import Role
from tests.helpers import make_user


def _repo(target: UserResult | None, owners: int = 1) -> AsyncMock:
    repo = AsyncMock()
    repo.get_by_id_and_tenant.return_value = target
    repo.count_owners.return_value = owners
    if target is not None:
        repo.set_role.side_effect = lambda user_id, tenant_id, role: replace(target, role=role)
    return repo


async def test_admin_promotes_employee_to_manager(admin: UserResult) -> None:
    target = make_user(Role.EMPLOYEE, user_id="u2")
    repo = _repo(target)
    updated = await RoleAssignmentService(repo).change_user_role(admin, "u2", "Manager")
    assert updated.role == "Manager"
    repo.set_role.assert_awaited_once_with("u2", admin.tenant_id, "Manager")


async def test_invalid_role_rejected(admin: UserResult) -> None:
    with pytest.raises(ValidationException):
        await RoleAssignmentService(_repo(None)).change_user_role(admin, "u2", "Boss")


async def test_target_in_other_tenant_is_not_found(admin: UserResult) -> None:
    repo = _repo(None)
    with pytest.raises(ResourceNotFoundException):
        await RoleAssignmentService(repo).change_user_role(admin, "u9", "Manager")
    repo.get_by_id_and_tenant.assert_awaited_once_with("u9", admin.tenant_id)


async def test_cannot_change_own_role(admin: UserResult) -> None:
    with pytest.raises(RoleChangeException) as exc_info:
        await RoleAssignmentService(_repo(admin)).change_user_role(admin, admin.id, "Employee")
    assert exc_info.value.message == "Cannot change your own role"


async def test_admin_cannot_modify_owner(admin: UserResult) -> None:
    target = make_user(Role.OWNER, user_id="o2")
    with pytest.raises(AuthorizationException) as exc_info:
        await RoleAssignmentService(_repo(target)).change_user_role(admin, "o2", "Manager")
    assert exc_info.value.message == "Only owners can modify other owner accounts"


async def test_admin_cannot_promote_to_owner(admin: UserResult) -> None:
    target = make_user(Role.MANAGER, user_id="u2")
    with pytest.raises(AuthorizationException) as exc_info:
        await RoleAssignmentService(_repo(target)).change_user_role(admin, "u2", Role.OWNER)
    assert exc_info.value.message == "Only owners can promote users to the Owner role"


async def test_owner_promotes_to_owner(owner: UserResult) -> None:
    target = make_user(Role.ADMINISTRATOR, user_id="u2")
    updated = await RoleAssignmentService(_repo(target)).change_user_role(owner, "u2", "Owner")
    assert updated.role == "Owner"


async def test_cannot_demote_only_owner(owner: UserResult) -> None:
    target = make_user(Role.OWNER, user_id="o2")
    repo = _repo(target, owners=1)
    with pytest.raises(RoleChangeException) as exc_info:
        await RoleAssignmentService(repo).change_user_role(owner, "o2", "Administrator")
    assert exc_info.value.message == "Cannot demote the only owner. Assign another owner first."
    repo.set_role.assert_not_awaited()


async def test_demote_owner_when_another_remains(owner: UserResult) -> None:
    target = make_user(Role.OWNER, user_id="o2")
    updated = await RoleAssignmentService(_repo(target, owners=2)).change_user_role(
        owner, "o2", "Administrator"
    )
    assert updated.role == "Administrator"


async def test_same_role_is_a_no_op(admin: UserResult) -> None:
    target = make_user(Role.MANAGER, user_id="u2")
    repo = _repo(target)
    result = await RoleAssignmentService(repo).change_user_role(admin, "u2", "Manager")
    assert result == target
    repo.set_role.assert_not_awaited()
