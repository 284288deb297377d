"""Shared test helpers: user factories, bearer headers, in-memory cache."""

from typing import Any

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.domain.roles import Role
from tenantdesk.infrastructure.security.jwt import create_access_token

TENANT_ID = "tenant-acme"


class FakeCache:
    """In-memory CacheProtocol implementation (TTL recorded, not enforced)."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}

    def is_available(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if not self.available:
            return False
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> bool:
        self.ttls.pop(key, None)
        return self.data.pop(key, None) is not None


def make_user(
    role: Role | str = Role.EMPLOYEE,
    user_id: str = "user-1",
    tenant_id: str = TENANT_ID,
    email: str | None = None,
) -> UserResult:
    role_name = role.value if isinstance(role, Role) else role
    return UserResult(
        id=user_id,
        tenant_id=tenant_id,
        email=email or f"{user_id}@example.com",
        role=role_name,
        is_active=True,
    )


def bearer(user: UserResult) -> dict[str, str]:
    token = create_access_token(user.id, user.tenant_id)
    return {"Authorization": f"Bearer {token}"}
