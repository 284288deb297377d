"""Users API: add a team member to the caller's tenant."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantdesk.api.v1.dependencies import get_team_service, require_permission
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import TeamService
from tenantdesk.core.limiter import limit_writes
from tenantdesk.schemas.user import UserCreateRequest, UserResponse

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    current_user: Annotated[UserResult, Depends(require_permission("users.create"))],
    team_svc: Annotated[TeamService, Depends(get_team_service)],
):
    """Create a user; requires the users_management plan feature and a free user slot."""
    user = await team_svc.add_member(
        current_user,
        email=body.email,
        password=body.password,
        role=body.role,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return UserResponse.model_validate(user)
