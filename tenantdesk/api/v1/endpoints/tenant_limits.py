"""Tenant limits API: custom limit override for the caller's tenant (Owner/Administrator).

Changes to an effective limit are recorded as events (see /events and /summary).
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from tenantdesk.api.v1.dependencies import (
    get_limits_repo,
    get_limits_service,
    get_limits_service_for_write,
    require_role,
)
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import LimitsService
from tenantdesk.core.limiter import limit_writes
from tenantdesk.domain.enums import LimitEventType
from tenantdesk.domain.exceptions import ResourceNotFoundException
from tenantdesk.domain.roles import Role
from tenantdesk.infrastructure.persistence.repositories import LimitsRepository
from tenantdesk.schemas.limits import (
    LimitEventResponse,
    LimitEventsResponse,
    PlanResponse,
    RecentActivityResponse,
    TenantLimitsResponse,
    TenantLimitsSummaryResponse,
    TenantLimitsUpdate,
    UsageLimitResponse,
)

router = APIRouter()

_require_admin = require_role(Role.ADMINISTRATOR)


@router.get("", response_model=TenantLimitsResponse)
async def get_tenant_limits(
    current_user: Annotated[UserResult, Depends(_require_admin)],
    limits_repo: Annotated[LimitsRepository, Depends(get_limits_repo)],
):
    """Return the tenant's custom limits row (404 when none is set)."""
    row = await limits_repo.get_tenant_limits(current_user.tenant_id)
    if row is None:
        raise ResourceNotFoundException("tenant_limits", current_user.tenant_id)
    return TenantLimitsResponse.model_validate(row)


@router.put("", response_model=TenantLimitsResponse)
@limit_writes
async def put_tenant_limits(
    request: Request,
    body: TenantLimitsUpdate,
    current_user: Annotated[UserResult, Depends(_require_admin)],
    limits_svc: Annotated[LimitsService, Depends(get_limits_service_for_write)],
):
    """Create or replace the tenant's custom limits."""
    row = await limits_svc.set_custom_limits(
        current_user.tenant_id,
        actor_id=current_user.id,
        max_users=body.max_users,
        max_shops=body.max_shops,
        monthly_email_limit=body.monthly_email_limit,
        override_reason=body.override_reason,
        expires_at=body.expires_at,
        is_active=body.is_active,
    )
    return TenantLimitsResponse.model_validate(row)


@router.delete("", status_code=204)
@limit_writes
async def delete_tenant_limits(
    request: Request,
    current_user: Annotated[UserResult, Depends(_require_admin)],
    limits_svc: Annotated[LimitsService, Depends(get_limits_service_for_write)],
):
    """Remove the tenant's custom limits; plan limits apply again."""
    if not await limits_svc.remove_custom_limits(current_user.tenant_id, actor_id=current_user.id):
        raise ResourceNotFoundException("tenant_limits", current_user.tenant_id)
    return Response(status_code=204)


@router.get("/summary", response_model=TenantLimitsSummaryResponse)
async def get_limits_summary(
    current_user: Annotated[UserResult, Depends(_require_admin)],
    limits_svc: Annotated[LimitsService, Depends(get_limits_service)],
):
    """Plan, custom limits, usage and limit changes of the last seven days."""
    summary = await limits_svc.get_summary(current_user.tenant_id)
    return TenantLimitsSummaryResponse(
        plan=PlanResponse.model_validate(summary.plan),
        subscription_status=summary.plan.subscription_status,
        custom_limits=(
            TenantLimitsResponse.model_validate(summary.custom_limits)
            if summary.custom_limits
            else None
        ),
        usage={u.resource: UsageLimitResponse.model_validate(u) for u in summary.usage},
        recent_activity=RecentActivityResponse(
            total=sum(summary.recent_events.values()), by_type=summary.recent_events
        ),
    )


@router.get("/events", response_model=LimitEventsResponse)
async def list_limit_events(
    current_user: Annotated[UserResult, Depends(_require_admin)],
    limits_svc: Annotated[LimitsService, Depends(get_limits_service)],
    event_type: LimitEventType | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    """Limit change events for the caller's tenant, newest first."""
    events, total = await limits_svc.list_events(
        current_user.tenant_id,
        event_type=event_type,
        since=from_date,
        until=to_date,
        limit=limit,
    )
    return LimitEventsResponse(
        events=[LimitEventResponse.model_validate(e) for e in events], total=total
    )
