"""Auth API: login, owner signup, and current user.

Uses only injected dependencies; JWT created via infrastructure security.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantdesk.api.v1.dependencies import (
    get_current_user,
    get_signup_service,
    get_tenant_repo,
    get_user_repo,
)
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import SignupService
from tenantdesk.core.limiter import limit_auth
from tenantdesk.domain.exceptions import AuthenticationException, TenantNotFoundException
from tenantdesk.infrastructure.persistence.repositories import TenantRepository, UserRepository
from tenantdesk.infrastructure.security.jwt import create_access_token
from tenantdesk.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from tenantdesk.schemas.tenant import TenantResponse
from tenantdesk.schemas.user import MeResponse, UserResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
):
    """Authenticate with email and password; return JWT carrying the user's tenant."""
    user = await user_repo.authenticate(email=body.email, password=body.password)
    if not user:
        raise AuthenticationException("Invalid credentials")
    token = create_access_token(user.id, user.tenant_id)
    return TokenResponse(access_token=token)


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limit_auth
async def register(
    request: Request,
    body: RegisterRequest,
    signup_svc: Annotated[SignupService, Depends(get_signup_service)],
):
    """Create a tenant and its Owner (public endpoint)."""
    result = await signup_svc.register_owner(
        email=body.email,
        password=body.password,
        company_name=body.company_name,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return RegisterResponse(
        access_token=result.access_token,
        tenant_id=result.tenant.id,
        tenant_name=result.tenant.name,
        tenant_slug=result.tenant.slug,
        user_id=result.owner_id,
    )


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repo)],
):
    """Return the authenticated user and their tenant."""
    tenant = await tenant_repo.get_by_id(current_user.tenant_id)
    if tenant is None:
        raise TenantNotFoundException(current_user.tenant_id)
    return MeResponse(
        **UserResponse.model_validate(current_user).model_dump(),
        tenant=TenantResponse.model_validate(tenant),
    )
