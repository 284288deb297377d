"""Roles API: role catalog, users by role, role changes, and per-tenant permission overrides."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenantdesk.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_permission_override_service,
    get_role_assignment_service,
    get_user_repo,
    require_plan_feature,
    require_role,
)
from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.services import (
    AuthorizationService,
    PermissionOverrideService,
    RoleAssignmentService,
)
from tenantdesk.core.limiter import limit_writes
from tenantdesk.domain.enums import PlanFeature
from tenantdesk.domain.permissions import PERMISSION_CATEGORIES, default_permissions_for
from tenantdesk.domain.roles import ROLE_DESCRIPTIONS, Role
from tenantdesk.infrastructure.persistence.repositories import UserRepository
from tenantdesk.schemas.role import (
    DefaultPermissionsResponse,
    MyPermissionsResponse,
    PermissionCategoryResponse,
    ResetResponse,
    RolePermissionsSaved,
    RolePermissionsUpdate,
    RoleResetRequest,
    RoleResponse,
    RolesListResponse,
    UserRoleUpdate,
    UsersByRoleResponse,
)
from tenantdesk.schemas.user import UserResponse

router = APIRouter()

_require_admin = require_role(Role.ADMINISTRATOR)
_require_owner = require_role(Role.OWNER)


def _catalog() -> list[PermissionCategoryResponse]:
    return [PermissionCategoryResponse.model_validate(c) for c in PERMISSION_CATEGORIES]


@router.get("", response_model=RolesListResponse)
async def list_roles(
    current_user: Annotated[UserResult, Depends(_require_admin)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
):
    """List every role with its effective permissions and user count in this tenant."""
    counts = await user_repo.count_by_role(current_user.tenant_id)
    roles = []
    for role in Role.by_rank_desc():
        effective = await auth_svc.get_effective_permissions(role, current_user.tenant_id)
        roles.append(
            RoleResponse(
                name=role.value,
                level=role.rank,
                description=ROLE_DESCRIPTIONS[role],
                user_count=counts.get(role.value, 0),
                permissions=dict(effective.permissions),
                is_customized=effective.is_customized,
            )
        )
    return RolesListResponse(roles=roles, permission_categories=_catalog())


@router.get("/defaults", response_model=DefaultPermissionsResponse)
async def get_default_permissions(
    _: Annotated[object, Depends(_require_admin)] = None,
):
    """Default permission matrix for all roles, plus the catalog."""
    return DefaultPermissionsResponse(
        defaults={role.value: default_permissions_for(role) for role in Role.by_rank_desc()},
        permission_categories=_catalog(),
    )


@router.get("/me/permissions", response_model=MyPermissionsResponse)
async def get_my_permissions(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Effective permissions of the caller."""
    effective = await auth_svc.get_effective_permissions(
        current_user.role, current_user.tenant_id
    )
    return MyPermissionsResponse(
        role=current_user.role,
        permissions=dict(effective.permissions),
        granted=effective.granted(),
        is_customized=effective.is_customized,
    )


@router.get("/users", response_model=UsersByRoleResponse)
async def list_users_by_role(
    current_user: Annotated[UserResult, Depends(_require_admin)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
):
    """Users in this tenant grouped by role name."""
    users = await user_repo.list_by_tenant(current_user.tenant_id)
    grouped: dict[str, list[UserResponse]] = {role.value: [] for role in Role.by_rank_desc()}
    for user in users:
        grouped.setdefault(user.role, []).append(UserResponse.model_validate(user))
    return UsersByRoleResponse(users_by_role=grouped, total=len(users))


@router.patch("/users/{user_id}/role", response_model=UserResponse)
@limit_writes
async def change_user_role(
    request: Request,
    user_id: str,
    body: UserRoleUpdate,
    current_user: Annotated[UserResult, Depends(_require_admin)],
    role_svc: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
):
    """Change a user's role within the caller's tenant."""
    updated = await role_svc.change_user_role(current_user, user_id, body.role)
    return UserResponse.model_validate(updated)


@router.put("/permissions", response_model=RolePermissionsSaved)
@limit_writes
async def save_role_permissions(
    request: Request,
    body: RolePermissionsUpdate,
    current_user: Annotated[UserResult, Depends(_require_owner)],
    override_svc: Annotated[
        PermissionOverrideService, Depends(get_permission_override_service)
    ],
    _: Annotated[
        object, Depends(require_plan_feature(PlanFeature.ROLES_MANAGEMENT))
    ] = None,
):
    """Save a role's permissions for this tenant (stored as a diff from defaults)."""
    effective = await override_svc.save_role_permissions(
        current_user.tenant_id, body.role, body.permissions, current_user
    )
    return RolePermissionsSaved(
        role=body.role.value,
        permissions=effective,
        is_customized=effective != default_permissions_for(body.role),
    )


@router.post("/permissions/reset", response_model=ResetResponse)
@limit_writes
async def reset_role_permissions(
    request: Request,
    body: RoleResetRequest,
    current_user: Annotated[UserResult, Depends(_require_owner)],
    override_svc: Annotated[
        PermissionOverrideService, Depends(get_permission_override_service)
    ],
):
    """Restore one role to its default permissions."""
    deleted = await override_svc.reset_role(current_user.tenant_id, body.role, current_user)
    return ResetResponse(reset=deleted)


@router.post("/permissions/reset-all", response_model=ResetResponse)
@limit_writes
async def reset_all_role_permissions(
    request: Request,
    current_user: Annotated[UserResult, Depends(_require_owner)],
    override_svc: Annotated[
        PermissionOverrideService, Depends(get_permission_override_service)
    ],
):
    """Restore every role in this tenant to its defaults."""
    deleted = await override_svc.reset_all(current_user.tenant_id, current_user)
    return ResetResponse(reset=deleted)
