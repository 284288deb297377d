"""Tenant limit checks against subscription plans and custom overrides.

Limit source for each resource, first match wins:
1. the tenant's custom limit row, when active, unexpired and the column is set;
2. the plan of the tenant's current subscription;
3. the Free plan.
A limit of None means unlimited.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from tenantdesk.application.dtos.limits import (
    LimitEvent,
    LimitsSummary,
    TenantLimitsResult,
    TenantPlan,
    UsageLimit,
)
from tenantdesk.application.interfaces.repositories import ILimitsRepository
from tenantdesk.domain.enums import LimitEventType, PlanFeature
from tenantdesk.domain.exceptions import LimitExceededException, PlanFeatureUnavailableException
from tenantdesk.infrastructure.cache.cache_protocol import CacheProtocol
from tenantdesk.infrastructure.cache.keys import tenant_plan_key
from tenantdesk.shared.utils.datetime import start_of_month_utc, utc_now

logger = logging.getLogger(__name__)

FREE_PLAN = TenantPlan(
    name="free",
    display_name="Free",
    max_users=1,
    max_shops=0,
    monthly_email_limit=100,
    allow_users_management=False,
    allow_roles_management=False,
)

# Catalog rows used to seed subscription_plan.
DEFAULT_PLANS: tuple[TenantPlan, ...] = (
    FREE_PLAN,
    TenantPlan(
        name="plus",
        display_name="Plus",
        max_users=3,
        max_shops=3,
        monthly_email_limit=500,
        allow_users_management=True,
        allow_roles_management=True,
    ),
    TenantPlan(
        name="pro",
        display_name="Pro",
        max_users=20,
        max_shops=10,
        monthly_email_limit=1000,
        allow_users_management=True,
        allow_roles_management=True,
    ),
)

_PLAN_LIMIT_FIELD = {
    "users": "max_users",
    "shops": "max_shops",
    "emails": "monthly_email_limit",
}

RECENT_EVENTS_WINDOW = timedelta(days=7)


def limit_change(old: int | None, new: int | None) -> LimitEventType | None:
    """Direction of a limit change; None means unlimited."""
    if old == new:
        return None
    if new is None or (old is not None and new > old):
        return LimitEventType.LIMIT_INCREASED
    return LimitEventType.LIMIT_DECREASED


class LimitsService:
    """Resolves the plan in effect and checks usage against effective limits."""

    def __init__(
        self,
        limits_repo: ILimitsRepository,
        cache: CacheProtocol | None = None,
        *,
        cache_ttl: int = 120,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.limits_repo = limits_repo
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._now = now

    async def get_tenant_plan(self, tenant_id: str) -> TenantPlan:
        """Plan of the tenant's current subscription; FREE_PLAN when there is none."""
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(tenant_plan_key(tenant_id))
            if cached is not None:
                return TenantPlan.from_dict(cached)
        plan = await self.limits_repo.get_active_plan(tenant_id)
        if plan is None:
            logger.debug("No active subscription for tenant %s; using Free plan", tenant_id)
            plan = FREE_PLAN
        if self.cache and self.cache.is_available():
            await self.cache.set(tenant_plan_key(tenant_id), plan.to_dict(), ttl=self.cache_ttl)
        return plan

    async def _custom_limits(self, tenant_id: str) -> TenantLimitsResult | None:
        row = await self.limits_repo.get_tenant_limits(tenant_id)
        if row is None or not row.applies_at(self._now()):
            return None
        return row

    async def _usage(self, tenant_id: str, resource: str, current: int) -> UsageLimit:
        plan = await self.get_tenant_plan(tenant_id)
        field = _PLAN_LIMIT_FIELD[resource]
        custom = await self._custom_limits(tenant_id)
        custom_value = getattr(custom, field) if custom else None
        if custom_value is not None:
            return UsageLimit(resource, current, custom_value, plan.name, is_custom_limit=True)
        return UsageLimit(resource, current, getattr(plan, field), plan.name, is_custom_limit=False)

    async def check_user_limits(self, tenant_id: str) -> UsageLimit:
        current = await self.limits_repo.count_active_users(tenant_id)
        return await self._usage(tenant_id, "users", current)

    async def check_shop_limits(self, tenant_id: str) -> UsageLimit:
        current = await self.limits_repo.count_active_shops(tenant_id)
        return await self._usage(tenant_id, "shops", current)

    async def check_email_limits(self, tenant_id: str) -> UsageLimit:
        """Emails sent since the start of the current UTC month against the monthly limit."""
        since = start_of_month_utc(self._now())
        current = await self.limits_repo.count_emails_since(tenant_id, since)
        return await self._usage(tenant_id, "emails", current)

    @staticmethod
    def _raise_if_full(usage: UsageLimit) -> None:
        if not usage.can_add:
            raise LimitExceededException(
                usage.resource, usage.current, usage.limit, usage.plan_name
            )

    async def validate_user_creation(self, tenant_id: str) -> UsageLimit:
        """Raise LimitExceededException when the tenant cannot add another user."""
        usage = await self.check_user_limits(tenant_id)
        self._raise_if_full(usage)
        return usage

    async def validate_shop_creation(self, tenant_id: str) -> UsageLimit:
        """Raise LimitExceededException when the tenant cannot add another shop."""
        usage = await self.check_shop_limits(tenant_id)
        self._raise_if_full(usage)
        return usage

    async def plan_allows(self, tenant_id: str, feature: str | PlanFeature) -> bool:
        plan = await self.get_tenant_plan(tenant_id)
        feature = PlanFeature(feature)
        if feature is PlanFeature.USERS_MANAGEMENT:
            return plan.allow_users_management
        return plan.allow_roles_management

    async def require_plan_feature(self, tenant_id: str, feature: str | PlanFeature) -> None:
        if not await self.plan_allows(tenant_id, feature):
            plan = await self.get_tenant_plan(tenant_id)
            raise PlanFeatureUnavailableException(PlanFeature(feature).value, plan.display_name)

    async def list_plans(self) -> list[TenantPlan]:
        """Active plan catalog; DEFAULT_PLANS when the catalog table is empty."""
        plans = await self.limits_repo.list_active_plans()
        return plans or list(DEFAULT_PLANS)

    async def check_all_limits(self, tenant_id: str) -> list[UsageLimit]:
        """User, shop and email usage, in that order."""
        return [
            await self.check_user_limits(tenant_id),
            await self.check_shop_limits(tenant_id),
            await self.check_email_limits(tenant_id),
        ]

    async def _record_changes(
        self,
        tenant_id: str,
        before: list[UsageLimit],
        after: list[UsageLimit],
        details: dict[str, Any],
    ) -> int:
        recorded = 0
        for old, new in zip(before, after, strict=True):
            event_type = limit_change(old.limit, new.limit)
            if event_type is None:
                continue
            await self.limits_repo.add_limit_event(
                tenant_id,
                event_type.value,
                resource=new.resource,
                current_count=new.current,
                limit_value=new.limit,
                details={**details, "previous_limit": old.limit},
            )
            recorded += 1
        return recorded

    async def set_custom_limits(
        self,
        tenant_id: str,
        *,
        actor_id: str,
        max_users: int | None,
        max_shops: int | None,
        monthly_email_limit: int | None,
        override_reason: str | None,
        expires_at: datetime | None,
        is_active: bool,
    ) -> TenantLimitsResult:
        """Create or replace the tenant's custom limits and record each effective limit change."""
        before = await self.check_all_limits(tenant_id)
        row = await self.limits_repo.upsert_tenant_limits(
            tenant_id,
            max_users=max_users,
            max_shops=max_shops,
            monthly_email_limit=monthly_email_limit,
            override_reason=override_reason,
            expires_at=expires_at,
            is_active=is_active,
            created_by=actor_id,
        )
        after = await self.check_all_limits(tenant_id)
        recorded = await self._record_changes(
            tenant_id,
            before,
            after,
            {"action": "custom_limits_set", "reason": override_reason, "actor_id": actor_id},
        )
        logger.info(
            "Tenant limits set: tenant=%s changes=%d by=%s", tenant_id, recorded, actor_id
        )
        return row

    async def remove_custom_limits(self, tenant_id: str, *, actor_id: str) -> bool:
        """Delete the custom limits row; plan limits apply again. False when there was none."""
        before = await self.check_all_limits(tenant_id)
        if not await self.limits_repo.delete_tenant_limits(tenant_id):
            return False
        after = await self.check_all_limits(tenant_id)
        recorded = await self._record_changes(
            tenant_id, before, after, {"action": "custom_limits_removed", "actor_id": actor_id}
        )
        logger.info(
            "Tenant limits removed: tenant=%s changes=%d by=%s", tenant_id, recorded, actor_id
        )
        return True

    async def get_summary(self, tenant_id: str) -> LimitsSummary:
        """Plan, custom limits, usage and event counts per type over RECENT_EVENTS_WINDOW."""
        plan = await self.get_tenant_plan(tenant_id)
        custom = await self.limits_repo.get_tenant_limits(tenant_id)
        usage = await self.check_all_limits(tenant_id)
        recent = await self.limits_repo.count_limit_events_by_type(
            tenant_id, self._now() - RECENT_EVENTS_WINDOW
        )
        return LimitsSummary(plan=plan, custom_limits=custom, usage=usage, recent_events=recent)

    async def list_events(
        self,
        tenant_id: str,
        *,
        event_type: str | LimitEventType | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 50,
    ) -> tuple[list[LimitEvent], int]:
        if event_type is not None:
            event_type = LimitEventType(event_type).value
        return await self.limits_repo.list_limit_events(
            tenant_id, event_type=event_type, since=since, until=until, limit=limit
        )
