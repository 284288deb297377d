"""DTOs for subscription plans and tenant limits (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TenantPlan:
    """Plan in effect for a tenant. None limits mean unlimited."""

    name: str
    display_name: str
    max_users: int | None
    max_shops: int | None
    monthly_email_limit: int | None
    allow_users_management: bool
    allow_roles_management: bool
    subscription_status: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenantPlan:
        return cls(**data)


@dataclass(frozen=True)
class TenantLimitsResult:
    """Custom limit override row for a tenant."""

    tenant_id: str
    max_users: int | None
    max_shops: int | None
    monthly_email_limit: int | None
    override_reason: str | None
    expires_at: datetime | None
    is_active: bool

    def applies_at(self, now: datetime) -> bool:
        """True when the row is active and not expired at now."""
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > now


@dataclass(frozen=True)
class UsageLimit:
    """Usage of one limited resource against its effective limit."""

    resource: str
    current: int
    limit: int | None
    plan_name: str
    is_custom_limit: bool

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    @property
    def can_add(self) -> bool:
        return self.limit is None or self.current < self.limit

    @property
    def remaining(self) -> int | None:
        if self.limit is None:
            return None
        return max(self.limit - self.current, 0)


@dataclass(frozen=True)
class LimitEvent:
    """A recorded change of one resource's effective limit."""

    id: str
    tenant_id: str
    event_type: str
    resource: str
    current_count: int
    limit_value: int | None
    details: dict[str, Any]
    created_at: datetime


@dataclass(frozen=True)
class LimitsSummary:
    """Plan, custom limits, usage and recent limit activity for one tenant."""

    plan: TenantPlan
    custom_limits: TenantLimitsResult | None
    usage: list[UsageLimit]
    recent_events: dict[str, int]
