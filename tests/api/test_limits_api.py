"""Subscription, tenant limits, users and shops API tests."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

from httpx import AsyncClient

from tenantdesk.api.v1.dependencies import (
    get_limits_repo,
    get_limits_service,
    get_limits_service_for_write,
    get_shop_repo,
    get_team_service,
)
from tenantdesk.application.dtos.limits import LimitEvent, TenantLimitsResult
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import AuthorizationService, LimitsService, TeamService
from tenantdesk.application.services.limits_service import DEFAULT_PLANS
from tenantdesk.main import app
from tests.helpers import make_user

PRO = next(p for p in DEFAULT_PLANS if p.name == "pro")


def _limits_repo(plan=PRO, users: int = 0, shops: int = 0, emails: int = 0) -> AsyncMock:
    repo = AsyncMock()
    repo.get_active_plan.return_value = plan
    repo.get_tenant_limits.return_value = None
    repo.count_active_users.return_value = users
    repo.count_active_shops.return_value = shops
    repo.count_emails_since.return_value = emails
    return repo


def _use_limits(repo: AsyncMock) -> LimitsService:
    svc = LimitsService(repo)
    app.dependency_overrides[get_limits_service] = lambda: svc
    return svc


def _use_limits_for_write(repo: AsyncMock) -> LimitsService:
    svc = LimitsService(repo)
    app.dependency_overrides[get_limits_service_for_write] = lambda: svc
    return svc


async def test_tenant_plan_with_usage(
    client: AsyncClient, login_as, employee: UserResult
) -> None:
    login_as(employee)
    _use_limits(_limits_repo(users=4, shops=1, emails=250))
    response = await client.get("/api/v1/subscription/tenant-plan")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "pro"
    assert data["usage"]["users"] == {
        "resource": "users",
        "current": 4,
        "limit": 20,
        "remaining": 16,
        "can_add": True,
        "is_unlimited": False,
        "is_custom_limit": False,
    }
    assert data["usage"]["emails"]["remaining"] == 750


async def test_tenant_plan_free_fallback(
    client: AsyncClient, login_as, employee: UserResult
) -> None:
    login_as(employee)
    _use_limits(_limits_repo(plan=None, users=1))
    data = (await client.get("/api/v1/subscription/tenant-plan")).json()
    assert data["name"] == "free"
    assert data["subscription_status"] is None
    assert data["usage"]["users"]["can_add"] is False
    assert data["allow_roles_management"] is False


async def test_create_user_at_limit_returns_403(
    client: AsyncClient, login_as, auth_service: AuthorizationService, admin: UserResult
) -> None:
    login_as(admin)
    user_repo = AsyncMock()
    limits = LimitsService(_limits_repo(users=20))
    app.dependency_overrides[get_team_service] = lambda: TeamService(limits, user_repo=user_repo)
    response = await client.post(
        "/api/v1/users",
        json={"email": "new@example.com", "password": "password123", "role": "Employee"},
    )
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "LIMIT_EXCEEDED"
    assert body["message"] == "Users limit reached (20/20) for plan pro"
    user_repo.create_user.assert_not_awaited()


async def test_create_user(
    client: AsyncClient, login_as, auth_service: AuthorizationService, admin: UserResult
) -> None:
    login_as(admin)
    user_repo = AsyncMock()
    user_repo.create_user.return_value = make_user("Manager", user_id="new-1")
    limits = LimitsService(_limits_repo(users=2))
    app.dependency_overrides[get_team_service] = lambda: TeamService(limits, user_repo=user_repo)
    response = await client.post(
        "/api/v1/users",
        json={"email": "new@example.com", "password": "password123", "role": "Manager"},
    )
    assert response.status_code == 201
    assert response.json()["id"] == "new-1"


async def test_create_user_needs_permission(
    client: AsyncClient, login_as, auth_service: AuthorizationService, manager: UserResult
) -> None:
    """Managers lack users.create by default."""
    login_as(manager)
    app.dependency_overrides[get_team_service] = lambda: AsyncMock()
    response = await client.post(
        "/api/v1/users", json={"email": "new@example.com", "password": "password123"}
    )
    assert response.status_code == 403
    assert response.json()["message"] == (
        "Insufficient permissions. Required permission: users.create, your role: Manager"
    )


async def test_list_shops(
    client: AsyncClient, login_as, auth_service: AuthorizationService, employee: UserResult
) -> None:
    login_as(employee)
    shop_repo = AsyncMock()
    shop_repo.list_by_tenant.return_value = [
        SimpleNamespace(id="s1", tenant_id=employee.tenant_id, name="Downtown", is_active=True)
    ]
    app.dependency_overrides[get_shop_repo] = lambda: shop_repo
    response = await client.get("/api/v1/shops")
    assert response.status_code == 200
    assert response.json()[0]["name"] == "Downtown"


async def test_tenant_limits_not_set_returns_404(
    client: AsyncClient, login_as, owner: UserResult
) -> None:
    login_as(owner)
    repo = AsyncMock()
    repo.get_tenant_limits.return_value = None
    app.dependency_overrides[get_limits_repo] = lambda: repo
    response = await client.get("/api/v1/tenant-limits")
    assert response.status_code == 404


async def test_put_tenant_limits(client: AsyncClient, login_as, admin: UserResult) -> None:
    login_as(admin)
    expires = datetime(2099, 1, 1, tzinfo=UTC)
    row = TenantLimitsResult(
        tenant_id=admin.tenant_id,
        max_users=50,
        max_shops=None,
        monthly_email_limit=None,
        override_reason="pilot",
        expires_at=expires,
        is_active=True,
    )
    repo = _limits_repo(users=4)
    repo.upsert_tenant_limits.return_value = row
    repo.get_tenant_limits.side_effect = [None, None, None, row, row, row]
    _use_limits_for_write(repo)
    response = await client.put(
        "/api/v1/tenant-limits",
        json={"max_users": 50, "override_reason": "pilot", "expires_at": expires.isoformat()},
    )
    assert response.status_code == 200
    assert response.json()["max_users"] == 50
    kwargs = repo.upsert_tenant_limits.await_args.kwargs
    assert kwargs["created_by"] == admin.id
    assert repo.upsert_tenant_limits.await_args.args == (admin.tenant_id,)
    event = repo.add_limit_event.await_args
    assert event.args == (admin.tenant_id, "limit_increased")
    assert event.kwargs["resource"] == "users"
    assert event.kwargs["limit_value"] == 50
    assert event.kwargs["details"]["previous_limit"] == 20


async def test_put_tenant_limits_requires_a_limit(
    client: AsyncClient, login_as, admin: UserResult
) -> None:
    login_as(admin)
    repo = _limits_repo()
    _use_limits_for_write(repo)
    response = await client.put("/api/v1/tenant-limits", json={"override_reason": "none"})
    assert response.status_code == 422
    repo.upsert_tenant_limits.assert_not_awaited()


async def test_tenant_limits_forbidden_for_manager(
    client: AsyncClient, login_as, manager: UserResult
) -> None:
    login_as(manager)
    response = await client.delete("/api/v1/tenant-limits")
    assert response.status_code == 403


async def test_delete_tenant_limits(client: AsyncClient, login_as, owner: UserResult) -> None:
    login_as(owner)
    repo = _limits_repo()
    repo.delete_tenant_limits.return_value = 1
    _use_limits_for_write(repo)
    response = await client.delete("/api/v1/tenant-limits")
    assert response.status_code == 204
    repo.delete_tenant_limits.assert_awaited_once_with(owner.tenant_id)


async def test_delete_tenant_limits_when_none_set(
    client: AsyncClient, login_as, owner: UserResult
) -> None:
    login_as(owner)
    repo = _limits_repo()
    repo.delete_tenant_limits.return_value = 0
    _use_limits_for_write(repo)
    response = await client.delete("/api/v1/tenant-limits")
    assert response.status_code == 404
    repo.add_limit_event.assert_not_awaited()


async def test_list_plans_is_public(client: AsyncClient) -> None:
    repo = _limits_repo()
    repo.list_active_plans.return_value = []
    _use_limits(repo)
    response = await client.get("/api/v1/subscription/plans")
    assert response.status_code == 200
    data = response.json()
    assert [p["name"] for p in data] == ["free", "plus", "pro"]
    assert data[2]["max_users"] == 20
    assert "subscription_status" not in data[0]


async def test_tenant_limits_summary(client: AsyncClient, login_as, admin: UserResult) -> None:
    login_as(admin)
    repo = _limits_repo(users=4, shops=2)
    repo.count_limit_events_by_type.return_value = {"limit_increased": 2, "limit_decreased": 1}
    _use_limits(repo)
    response = await client.get("/api/v1/tenant-limits/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["plan"]["name"] == "pro"
    assert data["custom_limits"] is None
    assert data["usage"]["shops"]["current"] == 2
    assert data["usage"]["users"]["remaining"] == 16
    assert data["recent_activity"] == {
        "total": 3,
        "by_type": {"limit_increased": 2, "limit_decreased": 1},
    }


async def test_tenant_limit_events(client: AsyncClient, login_as, owner: UserResult) -> None:
    login_as(owner)
    repo = _limits_repo()
    repo.list_limit_events.return_value = (
        [
            LimitEvent(
                id="ev-1",
                tenant_id=owner.tenant_id,
                event_type="limit_increased",
                resource="shops",
                current_count=2,
                limit_value=15,
                details={"previous_limit": 10, "action": "custom_limits_set"},
                created_at=datetime(2026, 3, 10, tzinfo=UTC),
            )
        ],
        4,
    )
    _use_limits(repo)
    response = await client.get(
        "/api/v1/tenant-limits/events", params={"event_type": "limit_increased", "limit": 1}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 4
    assert data["events"][0]["limit_value"] == 15
    assert data["events"][0]["details"]["previous_limit"] == 10
    repo.list_limit_events.assert_awaited_once_with(
        owner.tenant_id, event_type="limit_increased", since=None, until=None, limit=1
    )


async def test_tenant_limit_events_rejects_unknown_type(
    client: AsyncClient, login_as, owner: UserResult
) -> None:
    login_as(owner)
    _use_limits(_limits_repo())
    response = await client.get(
        "/api/v1/tenant-limits/events", params={"event_type": "limit_reached"}
    )
    assert response.status_code == 422
