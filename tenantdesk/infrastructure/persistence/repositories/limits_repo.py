"""Limits repository: subscription plan lookup, custom tenant limits, usage counts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.application.dtos.limits import LimitEvent, TenantLimitsResult, TenantPlan
from tenantdesk.domain.enums import SubscriptionStatus
from tenantdesk.infrastructure.persistence.models.subscription import (
    Subscription,
    SubscriptionPlan,
    TenantLimitEvent,
    TenantLimits,
)
from tenantdesk.infrastructure.persistence.models.usage import EmailSend, Shop
from tenantdesk.infrastructure.persistence.models.user import User
from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository
from tenantdesk.shared.utils.datetime import ensure_utc

_LIMIT_COLUMNS = (
    "max_users",
    "max_shops",
    "monthly_email_limit",
    "override_reason",
    "expires_at",
    "is_active",
    "created_by",
)


def _plan_to_result(plan: SubscriptionPlan, status: str | None = None) -> TenantPlan:
    return TenantPlan(
        name=plan.name,
        display_name=plan.display_name,
        max_users=plan.max_users,
        max_shops=plan.max_shops,
        monthly_email_limit=plan.monthly_email_limit,
        allow_users_management=plan.allow_users_management,
        allow_roles_management=plan.allow_roles_management,
        subscription_status=status,
    )


def _event_to_result(row: TenantLimitEvent) -> LimitEvent:
    return LimitEvent(
        id=row.id,
        tenant_id=row.tenant_id,
        event_type=row.event_type,
        resource=row.resource,
        current_count=row.current_count,
        limit_value=row.limit_value,
        details=dict(row.details or {}),
        created_at=ensure_utc(row.created_at),
    )


def _limits_to_result(row: TenantLimits) -> TenantLimitsResult:
    return TenantLimitsResult(
        tenant_id=row.tenant_id,
        max_users=row.max_users,
        max_shops=row.max_shops,
        monthly_email_limit=row.monthly_email_limit,
        override_reason=row.override_reason,
        expires_at=ensure_utc(row.expires_at),
        is_active=row.is_active,
    )


class LimitsRepository(BaseRepository[TenantLimits]):
    """Reads plans and usage; writes the tenant_limits row and its change events."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TenantLimits)

    async def get_active_plan(self, tenant_id: str) -> TenantPlan | None:
        """Plan of the most recently created subscription whose status grants the plan."""
        result = await self.db.execute(
            select(SubscriptionPlan, Subscription.status)
            .join(Subscription, Subscription.plan_id == SubscriptionPlan.id)
            .where(
                Subscription.tenant_id == tenant_id,
                Subscription.status.in_(SubscriptionStatus.grants_plan()),
                SubscriptionPlan.is_active.is_(True),
            )
            .order_by(Subscription.created_at.desc())
            .limit(1)
        )
        row = result.first()
        if row is None:
            return None
        plan, status = row
        return _plan_to_result(plan, status)

    async def _get_limits_row(self, tenant_id: str) -> TenantLimits | None:
        result = await self.db.execute(
            select(TenantLimits).where(TenantLimits.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_tenant_limits(self, tenant_id: str) -> TenantLimitsResult | None:
        row = await self._get_limits_row(tenant_id)
        return _limits_to_result(row) if row else None

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
        """Insert the tenant's row or replace it in one statement (ON CONFLICT on tenant_id)."""
        stmt = pg_insert(TenantLimits).values(
            tenant_id=tenant_id,
            max_users=max_users,
            max_shops=max_shops,
            monthly_email_limit=monthly_email_limit,
            override_reason=override_reason,
            expires_at=expires_at,
            is_active=is_active,
            created_by=created_by,
        )
        set_: dict[str, Any] = {name: stmt.excluded[name] for name in _LIMIT_COLUMNS}
        set_["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[TenantLimits.tenant_id], set_=set_
        ).returning(TenantLimits)
        result = await self.db.execute(stmt, execution_options={"populate_existing": True})
        return _limits_to_result(result.scalar_one())

    async def delete_tenant_limits(self, tenant_id: str) -> int:
        result = await self.db.execute(
            delete(TenantLimits).where(TenantLimits.tenant_id == tenant_id)
        )
        return result.rowcount or 0

    async def upsert_plan(self, plan: TenantPlan) -> bool:
        """Create or update the catalog row for plan.name; return True when created."""
        result = await self.db.execute(
            select(SubscriptionPlan).where(SubscriptionPlan.name == plan.name)
        )
        row = result.scalar_one_or_none()
        created = row is None
        if created:
            row = SubscriptionPlan(name=plan.name)
            self.db.add(row)
        row.display_name = plan.display_name
        row.max_users = plan.max_users
        row.max_shops = plan.max_shops
        row.monthly_email_limit = plan.monthly_email_limit
        row.allow_users_management = plan.allow_users_management
        row.allow_roles_management = plan.allow_roles_management
        row.is_active = True
        await self.db.flush()
        return created

    async def count_active_users(self, tenant_id: str) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(
                User.tenant_id == tenant_id, User.is_active.is_(True)
            )
        )
        return result.scalar_one()

    async def count_active_shops(self, tenant_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Shop.id)).where(
                Shop.tenant_id == tenant_id, Shop.is_active.is_(True)
            )
        )
        return result.scalar_one()

    async def count_emails_since(self, tenant_id: str, since: datetime) -> int:
        result = await self.db.execute(
            select(func.count(EmailSend.id)).where(
                EmailSend.tenant_id == tenant_id, EmailSend.sent_at >= since
            )
        )
        return result.scalar_one()

    async def list_active_plans(self) -> list[TenantPlan]:
        """Active catalog plans, smallest first (unlimited user counts last)."""
        result = await self.db.execute(
            select(SubscriptionPlan)
            .where(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.max_users.asc().nulls_last(), SubscriptionPlan.name)
        )
        return [_plan_to_result(plan) for plan in result.scalars().all()]

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
        row = await self.create(
            TenantLimitEvent(
                tenant_id=tenant_id,
                event_type=event_type,
                resource=resource,
                current_count=current_count,
                limit_value=limit_value,
                details=details or {},
            )
        )
        return _event_to_result(row)

    async def list_limit_events(
        self,
        tenant_id: str,
        *,
        event_type: str | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int = 50,
    ) -> tuple[list[LimitEvent], int]:
        """Newest events first, at most limit of them, plus the total matching count."""
        conditions = [TenantLimitEvent.tenant_id == tenant_id]
        if event_type is not None:
            conditions.append(TenantLimitEvent.event_type == event_type)
        if since is not None:
            conditions.append(TenantLimitEvent.created_at >= since)
        if until is not None:
            conditions.append(TenantLimitEvent.created_at <= until)
        total = (
            await self.db.execute(select(func.count(TenantLimitEvent.id)).where(*conditions))
        ).scalar_one()
        result = await self.db.execute(
            select(TenantLimitEvent)
            .where(*conditions)
            .order_by(TenantLimitEvent.created_at.desc(), TenantLimitEvent.id)
            .limit(limit)
        )
        return [_event_to_result(row) for row in result.scalars().all()], total

    async def count_limit_events_by_type(self, tenant_id: str, since: datetime) -> dict[str, int]:
        result = await self.db.execute(
            select(TenantLimitEvent.event_type, func.count(TenantLimitEvent.id))
            .where(TenantLimitEvent.tenant_id == tenant_id, TenantLimitEvent.created_at >= since)
            .group_by(TenantLimitEvent.event_type)
        )
        return {event_type: count for event_type, count in result.all()}
