"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tenantdesk.application.dtos.limits import LimitEvent, TenantLimitsResult, TenantPlan
    from tenantdesk.application.dtos.tenant import TenantResult
    from tenantdesk.application.dtos.user import UserResult


class IPermissionOverrideRepository(Protocol):
    """Per-tenant, per-role override documents (raw stored payloads)."""

    async def get_override(self, tenant_id: str, role: str) -> Any | None:
        """Return the stored payload for (tenant, role) or None."""

    async def upsert_override(
        self,
        tenant_id: str,
        role: str,
        payload: dict[str, Any],
        updated_by: str | None = None,
    ) -> None:
        """Insert or replace the single row for (tenant, role)."""

    async def delete_overrides(self, tenant_id: str, role: str | None = None) -> int:
        """Delete one role's row (or all rows when role is None); return count deleted."""


class IUserRepository(Protocol):
    """Tenant users and their roles."""

    async def get_by_id_and_tenant(self, user_id: str, tenant_id: str) -> UserResult | None:
        """Return the user if it belongs to the tenant."""

    async def list_by_tenant(self, tenant_id: str) -> list[UserResult]:
        """Return all users in the tenant ordered by email."""

    async def count_by_role(self, tenant_id: str) -> dict[str, int]:
        """Return {role: active user count} for the tenant."""

    async def count_owners(self, tenant_id: str) -> int:
        """Return number of active Owner users in the tenant."""

    async def set_role(self, user_id: str, tenant_id: str, role: str) -> UserResult:
        """Persist a new role for the user and return the updated read-model."""


class ITenantRepository(Protocol):
    """Tenants (companies)."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""

    async def create_tenant(self, name: str) -> TenantResult:
        """Create an active tenant with a unique slug derived from name."""


class ILimitsRepository(Protocol):
    """Subscription plans, custom tenant limits and usage counters."""

    async def get_active_plan(self, tenant_id: str) -> TenantPlan | None:
        """Return the plan of the tenant's current subscription, or None."""

    async def get_tenant_limits(self, tenant_id: str) -> TenantLimitsResult | None:
        """Return the tenant's custom limit row, or None."""

    async def upsert_tenant_limits(
        self,
        tenant_id: str,
        *,
        max_users: int | None,
        max_shops: int | None,
        monthly_email_limit: int | None,
        override_reason: str | None,
        expires_at: datetime | None,
        is_active: bool,
        created_by: str | None,
    ) -> TenantLimitsResult:
        """Insert or replace the tenant's custom limit row."""

    async def delete_tenant_limits(self, tenant_id: str) -> int:
        """Delete the tenant's custom limit row; return count deleted."""

    async def count_active_users(self, tenant_id: str) -> int:
        """Return active users in the tenant."""

    async def count_active_shops(self, tenant_id: str) -> int:
        """Return active shops in the tenant."""

    async def count_emails_since(self, tenant_id: str, since: datetime) -> int:
        """Return emails sent by the tenant at or after since."""

    async def list_active_plans(self) -> list[TenantPlan]:
        """Return the active plan catalog."""

    async def add_limit_event(
        self,
        tenant_id: str,
        event_type: str,
        *,
        resource: str,
        current_count: int,
        limit_value: int | None,
        details: dict[str, Any] | None = None,
    ) -> LimitEvent:
        """Record a change of a resource's effective limit."""

    async def list_limit_events(
        self,
        tenant_id: str,
        *,
        event_type: str | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 50,
    ) -> tuple[list[LimitEvent], int]:
        """Return newest matching events (at most limit) and the total count."""

    async def count_limit_events_by_type(self, tenant_id: str, since: datetime) -> dict[str, int]:
        """Return event counts per type at or after since."""
