"""Authentication and authorization gates (composition root).

The caller's tenant is taken from the JWT tenant_id claim and verified
against the user row; there is no client-supplied tenant header.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import AuthorizationService, LimitsService
from tenantdesk.domain.enums import PlanFeature
from tenantdesk.domain.exceptions import AuthenticationException
from tenantdesk.domain.roles import Role
from tenantdesk.infrastructure.persistence.repositories import UserRepository
from tenantdesk.infrastructure.security.jwt import decode_access_token

from .repos import get_user_repo
from .services import get_authorization_service, get_limits_service

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present and active; else None."""
    if not credentials:
        return None
    try:
        claims = decode_access_token(credentials.credentials)
    except ValueError:
        return None
    user = await user_repo.get_by_id_and_tenant(claims.user_id, claims.tenant_id)
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise AuthenticationException()
    return current_user


def require_role(*roles: Role | str):
    """Dependency factory: require JWT auth and a role ranking at least one of roles."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
    ) -> UserResult:
        AuthorizationService.require_role(current_user.role, roles)
        return current_user

    return _require


def require_permission(*keys: str):
    """Dependency factory: require JWT auth and any of the permission keys (OR)."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        await auth_svc.require_permission(current_user.role, current_user.tenant_id, keys)
        return current_user

    return _require


def require_plan_feature(feature: PlanFeature):
    """Dependency factory: require JWT auth and a plan that includes feature."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        limits_service: Annotated[LimitsService, Depends(get_limits_service)],
    ) -> UserResult:
        await limits_service.require_plan_feature(current_user.tenant_id, feature)
        return current_user

    return _require
