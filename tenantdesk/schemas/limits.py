"""Subscription plan, usage and tenant limit schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class UsageLimitResponse(BaseModel):
    """Usage of one resource. limit and remaining are None when unlimited."""

    model_config = ConfigDict(from_attributes=True)

    resource: str
    current: int
    limit: int | None
    remaining: int | None
    can_add: bool
    is_unlimited: bool
    is_custom_limit: bool


class PlanResponse(BaseModel):
    """A catalog plan. Null limits mean unlimited."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    display_name: str
    max_users: int | None
    max_shops: int | None
    monthly_email_limit: int | None
    allow_users_management: bool
    allow_roles_management: bool


class TenantPlanResponse(PlanResponse):
    """Plan in effect for the caller's tenant plus current usage."""

    subscription_status: str | None
    usage: dict[str, UsageLimitResponse]


class TenantLimitsUpdate(BaseModel):
    """Request body for PUT /tenant-limits. Null limit columns defer to the plan."""

    max_users: int | None = Field(default=None, ge=0)
    max_shops: int | None = Field(default=None, ge=0)
    monthly_email_limit: int | None = Field(default=None, ge=0)
    override_reason: str | None = Field(default=None, max_length=500)
    expires_at: datetime | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def at_least_one_limit(self) -> "TenantLimitsUpdate":
        if (
            self.max_users is None
            and self.max_shops is None
            and self.monthly_email_limit is None
        ):
            raise ValueError("at least one of max_users, max_shops, monthly_email_limit is required")
        return self


class TenantLimitsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tenant_id: str
    max_users: int | None
    max_shops: int | None
    monthly_email_limit: int | None
    override_reason: str | None
    expires_at: datetime | None
    is_active: bool


class LimitEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_type: str
    resource: str
    current_count: int
    limit_value: int | None
    details: dict[str, Any]
    created_at: datetime


class LimitEventsResponse(BaseModel):
    """Newest events first; total counts every match, not only the returned page."""

    events: list[LimitEventResponse]
    total: int


class RecentActivityResponse(BaseModel):
    total: int
    by_type: dict[str, int]


class TenantLimitsSummaryResponse(BaseModel):
    """Plan, custom limits, usage and the last week's limit changes for the caller's tenant."""

    plan: PlanResponse
    subscription_status: str | None
    custom_limits: TenantLimitsResponse | None
    usage: dict[str, UsageLimitResponse]
    recent_activity: RecentActivityResponse
