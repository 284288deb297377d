"""Shops API (tenant-scoped)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantdesk.api.v1.dependencies import (
    get_shop_repo,
    get_team_service,
    require_permission,
)
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import TeamService
from tenantdesk.core.limiter import limit_writes
from tenantdesk.infrastructure.persistence.repositories import ShopRepository
from tenantdesk.schemas.shop import ShopCreateRequest, ShopResponse

router = APIRouter()


@router.get("", response_model=list[ShopResponse])
async def list_shops(
    current_user: Annotated[UserResult, Depends(require_permission("shops.view"))],
    shop_repo: Annotated[ShopRepository, Depends(get_shop_repo)],
):
    """List shops in the caller's tenant."""
    shops = await shop_repo.list_by_tenant(current_user.tenant_id)
    return [ShopResponse.model_validate(s) for s in shops]


@router.post("", response_model=ShopResponse, status_code=201)
@limit_writes
async def create_shop(
    request: Request,
    body: ShopCreateRequest,
    current_user: Annotated[UserResult, Depends(require_permission("shops.create"))],
    team_svc: Annotated[TeamService, Depends(get_team_service)],
):
    """Create a shop when the tenant's shop limit allows it."""
    shop = await team_svc.add_shop(current_user, body.name)
    return ShopResponse.model_validate(shop)
