"""Application service dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tenantdesk.application.services import (
    AuthorizationService,
    LimitsService,
    PendingSignupStore,
    PermissionOverrideService,
    RoleAssignmentService,
    SignupService,
    TeamService,
)
from tenantdesk.core.config import get_settings
from tenantdesk.infrastructure.persistence.repositories import (
    LimitsRepository,
    PermissionOverrideRepository,
    ShopRepository,
    TenantRepository,
    UserRepository,
)
from tenantdesk.infrastructure.security.jwt import create_access_token

from .repos import (
    get_cache,
    get_limits_repo,
    get_limits_repo_for_write,
    get_override_repo,
    get_override_repo_for_write,
    get_shop_repo_for_write,
    get_tenant_repo_for_write,
    get_user_repo_for_write,
)


def get_authorization_service(
    override_repo: Annotated[PermissionOverrideRepository, Depends(get_override_repo)],
) -> AuthorizationService:
    """Permission resolver for the caller's tenant (request-scoped, not cached)."""
    return AuthorizationService(override_repo)


def get_limits_service(
    request: Request,
    limits_repo: Annotated[LimitsRepository, Depends(get_limits_repo)],
) -> LimitsService:
    """Plan and usage checks. Plan lookups use the shared cache when Redis is enabled."""
    return LimitsService(
        limits_repo,
        get_cache(request),
        cache_ttl=get_settings().cache_ttl_tenant_plan,
    )


def get_limits_service_for_write(
    request: Request,
    limits_repo: Annotated[LimitsRepository, Depends(get_limits_repo_for_write)],
) -> LimitsService:
    """Limits service on the transactional session (custom limits and their events)."""
    return LimitsService(
        limits_repo,
        get_cache(request),
        cache_ttl=get_settings().cache_ttl_tenant_plan,
    )


def get_permission_override_service(
    override_repo: Annotated[
        PermissionOverrideRepository, Depends(get_override_repo_for_write)
    ],
) -> PermissionOverrideService:
    return PermissionOverrideService(override_repo)


def get_role_assignment_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
) -> RoleAssignmentService:
    return RoleAssignmentService(user_repo)


def get_team_service(
    limits_service: Annotated[LimitsService, Depends(get_limits_service)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    shop_repo: Annotated[ShopRepository, Depends(get_shop_repo_for_write)],
) -> TeamService:
    return TeamService(limits_service, user_repo=user_repo, shop_repo=shop_repo)


def get_pending_signup_store(request: Request) -> PendingSignupStore:
    """Company-name store keyed by email; unavailable when Redis is disabled."""
    return PendingSignupStore(
        get_cache(request), ttl_seconds=get_settings().pending_signup_ttl_seconds
    )


def get_signup_service(
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repo_for_write)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    pending_store: Annotated[PendingSignupStore, Depends(get_pending_signup_store)],
) -> SignupService:
    """Signup service. Tenant and owner share one transactional session."""
    return SignupService(
        tenant_repo=tenant_repo,
        user_repo=user_repo,
        pending_store=pending_store,
        create_token=create_access_token,
    )
