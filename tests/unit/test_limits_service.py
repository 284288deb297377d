"""Tests for LimitsService: plans, custom limits, usage checks, features and limit events."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from tenantdesk.application.dtos.limits import TenantLimitsResult, TenantPlan
from tenantdesk.application.services.limits_service import (
    DEFAULT_PLANS,
    FREE_PLAN,
    LimitsService,
    limit_change,
)
from tenantdesk.domain.enums import LimitEventType, PlanFeature
from tenantdesk.domain.exceptions import LimitExceededException, PlanFeatureUnavailableException
from tenantdesk.infrastructure.cache.keys import tenant_plan_key
from tests.helpers import FakeCache

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
PLUS = next(p for p in DEFAULT_PLANS if p.name == "plus")


def _limits(**overrides: object) -> TenantLimitsResult:
    values: dict = {
        "tenant_id": "t1",
        "max_users": None,
        "max_shops": None,
        "monthly_email_limit": None,
        "override_reason": "beta customer",
        "expires_at": None,
        "is_active": True,
    }
    values.update(overrides)
    return TenantLimitsResult(**values)


@pytest.fixture
def limits_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_active_plan.return_value = PLUS
    repo.get_tenant_limits.return_value = None
    repo.count_active_users.return_value = 0
    repo.count_active_shops.return_value = 0
    repo.count_emails_since.return_value = 0
    return repo


def _service(repo: AsyncMock, cache: FakeCache | None = None) -> LimitsService:
    return LimitsService(repo, cache, now=lambda: NOW)


async def test_no_subscription_falls_back_to_free(limits_repo: AsyncMock) -> None:
    limits_repo.get_active_plan.return_value = None
    plan = await _service(limits_repo).get_tenant_plan("t1")
    assert plan == FREE_PLAN


async def test_plan_is_cached(limits_repo: AsyncMock, fake_cache: FakeCache) -> None:
    svc = _service(limits_repo, fake_cache)
    first = await svc.get_tenant_plan("t1")
    second = await svc.get_tenant_plan("t1")
    assert first == second == PLUS
    limits_repo.get_active_plan.assert_awaited_once()
    assert fake_cache.ttls[tenant_plan_key("t1")] == 120


async def test_user_limit_from_plan(limits_repo: AsyncMock) -> None:
    limits_repo.count_active_users.return_value = 2
    usage = await _service(limits_repo).check_user_limits("t1")
    assert (usage.current, usage.limit, usage.plan_name) == (2, 3, "plus")
    assert usage.can_add and usage.remaining == 1
    assert not usage.is_custom_limit


async def test_custom_limit_wins_over_plan(limits_repo: AsyncMock) -> None:
    limits_repo.get_tenant_limits.return_value = _limits(max_users=10)
    limits_repo.count_active_users.return_value = 3
    usage = await _service(limits_repo).check_user_limits("t1")
    assert usage.limit == 10
    assert usage.is_custom_limit


async def test_custom_limit_null_column_defers_to_plan(limits_repo: AsyncMock) -> None:
    limits_repo.get_tenant_limits.return_value = _limits(max_users=10)
    usage = await _service(limits_repo).check_shop_limits("t1")
    assert usage.limit == 3
    assert not usage.is_custom_limit


@pytest.mark.parametrize(
    "row",
    [
        _limits(max_users=50, expires_at=NOW - timedelta(days=1)),
        _limits(max_users=50, is_active=False),
    ],
)
async def test_expired_or_inactive_custom_limit_ignored(
    limits_repo: AsyncMock, row: TenantLimitsResult
) -> None:
    limits_repo.get_tenant_limits.return_value = row
    usage = await _service(limits_repo).check_user_limits("t1")
    assert usage.limit == 3


async def test_unlimited_plan(limits_repo: AsyncMock) -> None:
    limits_repo.get_active_plan.return_value = TenantPlan(
        name="enterprise",
        display_name="Enterprise",
        max_users=None,
        max_shops=None,
        monthly_email_limit=None,
        allow_users_management=True,
        allow_roles_management=True,
    )
    limits_repo.count_active_users.return_value = 5000
    usage = await _service(limits_repo).validate_user_creation("t1")
    assert usage.is_unlimited and usage.can_add and usage.remaining is None


async def test_validate_user_creation_raises_at_limit(limits_repo: AsyncMock) -> None:
    limits_repo.count_active_users.return_value = 3
    with pytest.raises(LimitExceededException) as exc_info:
        await _service(limits_repo).validate_user_creation("t1")
    assert exc_info.value.details == {
        "resource": "users",
        "current": 3,
        "limit": 3,
        "plan_name": "plus",
    }


async def test_free_plan_allows_no_shops(limits_repo: AsyncMock) -> None:
    limits_repo.get_active_plan.return_value = None
    with pytest.raises(LimitExceededException):
        await _service(limits_repo).validate_shop_creation("t1")


async def test_email_usage_counts_from_start_of_month(limits_repo: AsyncMock) -> None:
    limits_repo.count_emails_since.return_value = 42
    usage = await _service(limits_repo).check_email_limits("t1")
    limits_repo.count_emails_since.assert_awaited_once_with(
        "t1", datetime(2026, 3, 1, tzinfo=UTC)
    )
    assert (usage.current, usage.limit, usage.remaining) == (42, 500, 458)


async def test_plan_features(limits_repo: AsyncMock) -> None:
    svc = _service(limits_repo)
    assert await svc.plan_allows("t1", PlanFeature.ROLES_MANAGEMENT)
    assert await svc.plan_allows("t1", "users_management")


async def test_require_plan_feature_on_free(limits_repo: AsyncMock) -> None:
    limits_repo.get_active_plan.return_value = None
    with pytest.raises(PlanFeatureUnavailableException) as exc_info:
        await _service(limits_repo).require_plan_feature("t1", PlanFeature.ROLES_MANAGEMENT)
    assert exc_info.value.details == {"feature": "roles_management", "plan_name": "Free"}


@pytest.mark.parametrize(
    ("old", "new", "expected"),
    [
        (3, 3, None),
        (None, None, None),
        (3, 5, LimitEventType.LIMIT_INCREASED),
        (3, None, LimitEventType.LIMIT_INCREASED),
        (5, 3, LimitEventType.LIMIT_DECREASED),
        (None, 10, LimitEventType.LIMIT_DECREASED),
    ],
)
def test_limit_change(old: int | None, new: int | None, expected: LimitEventType | None) -> None:
    assert limit_change(old, new) is expected


async def test_set_custom_limits_records_raised_shop_limit(limits_repo: AsyncMock) -> None:
    row = _limits(max_shops=5)
    # Three reads before the upsert, three after.
    limits_repo.get_tenant_limits.side_effect = [None, None, None, row, row, row]
    limits_repo.upsert_tenant_limits.return_value = row

    result = await _service(limits_repo).set_custom_limits(
        "t1",
        actor_id="admin-1",
        max_users=None,
        max_shops=5,
        monthly_email_limit=None,
        override_reason="beta customer",
        expires_at=None,
        is_active=True,
    )

    assert result == row
    assert limits_repo.upsert_tenant_limits.await_args.kwargs["created_by"] == "admin-1"
    limits_repo.add_limit_event.assert_awaited_once_with(
        "t1",
        "limit_increased",
        resource="shops",
        current_count=0,
        limit_value=5,
        details={
            "action": "custom_limits_set",
            "reason": "beta customer",
            "actor_id": "admin-1",
            "previous_limit": 3,
        },
    )


async def test_set_custom_limits_without_effective_change_records_nothing(
    limits_repo: AsyncMock,
) -> None:
    row = _limits(max_users=3)
    limits_repo.upsert_tenant_limits.return_value = row
    limits_repo.get_tenant_limits.side_effect = [None, None, None, row, row, row]
    await _service(limits_repo).set_custom_limits(
        "t1",
        actor_id="admin-1",
        max_users=3,
        max_shops=None,
        monthly_email_limit=None,
        override_reason=None,
        expires_at=None,
        is_active=True,
    )
    limits_repo.add_limit_event.assert_not_awaited()


async def test_remove_custom_limits_records_return_to_plan(limits_repo: AsyncMock) -> None:
    row = _limits(max_users=10)
    limits_repo.get_tenant_limits.side_effect = [row, row, row, None, None, None]
    limits_repo.delete_tenant_limits.return_value = 1
    limits_repo.count_active_users.return_value = 2

    assert await _service(limits_repo).remove_custom_limits("t1", actor_id="admin-1") is True

    limits_repo.add_limit_event.assert_awaited_once()
    call = limits_repo.add_limit_event.await_args
    assert call.args == ("t1", "limit_decreased")
    assert call.kwargs["resource"] == "users"
    assert call.kwargs["current_count"] == 2
    assert call.kwargs["limit_value"] == 3
    assert call.kwargs["details"]["previous_limit"] == 10
    assert call.kwargs["details"]["action"] == "custom_limits_removed"


async def test_remove_custom_limits_without_row(limits_repo: AsyncMock) -> None:
    limits_repo.delete_tenant_limits.return_value = 0
    assert await _service(limits_repo).remove_custom_limits("t1", actor_id="admin-1") is False
    limits_repo.add_limit_event.assert_not_awaited()


async def test_list_plans_falls_back_to_defaults(limits_repo: AsyncMock) -> None:
    limits_repo.list_active_plans.return_value = []
    assert await _service(limits_repo).list_plans() == list(DEFAULT_PLANS)


async def test_list_plans_from_catalog(limits_repo: AsyncMock) -> None:
    limits_repo.list_active_plans.return_value = [PLUS]
    assert await _service(limits_repo).list_plans() == [PLUS]


async def test_summary_counts_events_over_last_week(limits_repo: AsyncMock) -> None:
    limits_repo.count_limit_events_by_type.return_value = {"limit_increased": 2}
    limits_repo.count_active_shops.return_value = 1

    summary = await _service(limits_repo).get_summary("t1")

    assert summary.plan == PLUS
    assert summary.custom_limits is None
    assert [u.resource for u in summary.usage] == ["users", "shops", "emails"]
    assert summary.usage[1].current == 1
    assert summary.recent_events == {"limit_increased": 2}
    limits_repo.count_limit_events_by_type.assert_awaited_once_with(
        "t1", NOW - timedelta(days=7)
    )


async def test_list_events_passes_event_type_value(limits_repo: AsyncMock) -> None:
    limits_repo.list_limit_events.return_value = ([], 0)
    events, total = await _service(limits_repo).list_events(
        "t1", event_type=LimitEventType.LIMIT_DECREASED, limit=10
    )
    assert (events, total) == ([], 0)
    limits_repo.list_limit_events.assert_awaited_once_with(
        "t1", event_type="limit_decreased", since=None, until=None, limit=10
    )


async def test_list_events_rejects_unknown_type(limits_repo: AsyncMock) -> None:
    with pytest.raises(ValueError):
        await _service(limits_repo).list_events("t1", event_type="limit_reached")
