"""Tests for TeamService (adding members and shops within plan limits)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services.team_service import TeamService
from tenantdesk.domain.enums import PlanFeature
from tenantdesk.domain.exceptions import (
    AuthorizationException,
    LimitExceededException,
    PlanFeatureUnavailableException,
    ValidationException,
)
from tenantdesk.domain.roles import Role
from tests.helpers import make_user


@pytest.fixture
def limits_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def user_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create_user.side_effect = lambda **kw: make_user(
        kw["role"], user_id="new-1", tenant_id=kw["tenant_id"], email=kw["email"]
    )
    return repo


async def test_add_member_checks_plan_then_limit(
    limits_service: AsyncMock, user_repo: AsyncMock, admin: UserResult
) -> None:
    svc = TeamService(limits_service, user_repo=user_repo)
    user = await svc.add_member(admin, "new@example.com", "password123", "Manager")
    assert user.role == "Manager"
    limits_service.require_plan_feature.assert_awaited_once_with(
        admin.tenant_id, PlanFeature.USERS_MANAGEMENT
    )
    limits_service.validate_user_creation.assert_awaited_once_with(admin.tenant_id)
    assert user_repo.create_user.await_args.kwargs["role"] is Role.MANAGER


async def test_add_member_rejected_at_limit(
    limits_service: AsyncMock, user_repo: AsyncMock, admin: UserResult
) -> None:
    limits_service.validate_user_creation.side_effect = LimitExceededException("users", 3, 3, "plus")
    with pytest.raises(LimitExceededException):
        await TeamService(limits_service, user_repo=user_repo).add_member(
            admin, "new@example.com", "password123", "Employee"
        )
    user_repo.create_user.assert_not_awaited()


async def test_add_member_requires_users_management(
    limits_service: AsyncMock, user_repo: AsyncMock, owner: UserResult
) -> None:
    limits_service.require_plan_feature.side_effect = PlanFeatureUnavailableException(
        "users_management", "Free"
    )
    with pytest.raises(PlanFeatureUnavailableException):
        await TeamService(limits_service, user_repo=user_repo).add_member(
            owner, "new@example.com", "password123", "Employee"
        )
    limits_service.validate_user_creation.assert_not_awaited()


async def test_only_owner_adds_owner(
    limits_service: AsyncMock, user_repo: AsyncMock, admin: UserResult
) -> None:
    with pytest.raises(AuthorizationException):
        await TeamService(limits_service, user_repo=user_repo).add_member(
            admin, "new@example.com", "password123", Role.OWNER
        )


async def test_invalid_role(limits_service: AsyncMock, admin: UserResult) -> None:
    with pytest.raises(ValidationException):
        await TeamService(limits_service).add_member(admin, "x@example.com", "password123", "CEO")


async def test_add_shop(limits_service: AsyncMock, admin: UserResult) -> None:
    shop_repo = AsyncMock()
    shop_repo.create_shop.return_value = SimpleNamespace(id="shop-1", name="Downtown")
    shop = await TeamService(limits_service, shop_repo=shop_repo).add_shop(admin, "Downtown")
    assert shop.id == "shop-1"
    limits_service.validate_shop_creation.assert_awaited_once_with(admin.tenant_id)
    shop_repo.create_shop.assert_awaited_once_with(admin.tenant_id, "Downtown")
