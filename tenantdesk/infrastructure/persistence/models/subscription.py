"""Subscription plan, tenant subscription, and tenant limit override models."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from tenantdesk.domain.enums import SubscriptionStatus
from tenantdesk.infrastructure.persistence.database import Base
from tenantdesk.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TimestampMixin,
)


class SubscriptionPlan(CuidMixin, TimestampMixin, Base):
    """Global plan catalog (Free, Plus, Pro). NULL limits mean unlimited."""

    __tablename__ = "subscription_plan"

    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    max_users: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_shops: Mapped[int | None] = mapped_column(Integer, nullable=True)
    monthly_email_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    allow_users_management: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    allow_roles_management: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )


class Subscription(MultiTenantModel, Base):
    """A tenant's subscription to a plan. Table: subscription."""

    __tablename__ = "subscription"

    plan_id: Mapped[str] = mapped_column(
        String, ForeignKey("subscription_plan.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True
    )
    current_period_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class TenantLimits(MultiTenantModel, Base):
    """Custom per-tenant limits set by operators. NULL columns fall back to the plan.

    Table: tenant_limits. One row per tenant; ignored when inactive or expired.
    """

    __tablename__ = "tenant_limits"

    max_users: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_shops: Mapped[int | None] = mapped_column(Integer, nullable=True)
    monthly_email_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    override_reason: Mapped[str | None] = mapped_column(String, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    created_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (UniqueConstraint("tenant_id", name="uq_tenant_limits_tenant"),)


class TenantLimitEvent(MultiTenantModel, Base):
    """Audit row written when a tenant's effective limit for a resource changes.

    Table: tenant_limit_event. limit_value is the new limit (NULL = unlimited);
    details carries previous_limit, action, reason and actor_id.
    """

    __tablename__ = "tenant_limit_event"

    event_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    resource: Mapped[str] = mapped_column(String, nullable=False)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False)
    limit_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
