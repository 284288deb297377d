"""Subscription API: public plan catalog, and the plan in effect with usage for the caller's tenant."""

from typing import Annotated

from fastapi import APIRouter, Depends

from tenantdesk.api.v1.dependencies import get_current_user, get_limits_service
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import LimitsService
from tenantdesk.schemas.limits import PlanResponse, TenantPlanResponse, UsageLimitResponse

router = APIRouter()


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans(
    limits_svc: Annotated[LimitsService, Depends(get_limits_service)],
):
    """Return active subscription plans (public)."""
    return [PlanResponse.model_validate(plan) for plan in await limits_svc.list_plans()]


@router.get("/tenant-plan", response_model=TenantPlanResponse)
async def get_tenant_plan(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    limits_svc: Annotated[LimitsService, Depends(get_limits_service)],
):
    """Return the tenant's plan (Free when no active subscription) with user, shop and email usage."""
    tenant_id = current_user.tenant_id
    plan = await limits_svc.get_tenant_plan(tenant_id)
    usage = await limits_svc.check_all_limits(tenant_id)
    return TenantPlanResponse(
        **PlanResponse.model_validate(plan).model_dump(),
        subscription_status=plan.subscription_status,
        usage={u.resource: UsageLimitResponse.model_validate(u) for u in usage},
    )
