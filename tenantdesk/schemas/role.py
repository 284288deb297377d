"""Role administration API schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from tenantdesk.domain.roles import Role
from tenantdesk.schemas.user import UserResponse


class PermissionDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    description: str


class PermissionCategoryResponse(BaseModel):
    """One catalog group (e.g. users.*) as shown in the roles UI."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    description: str
    permissions: list[PermissionDetailResponse]


class RoleResponse(BaseModel):
    """A role with its effective permissions in the caller's tenant."""

    name: str
    level: int
    description: str
    user_count: int
    permissions: dict[str, bool]
    is_system: bool = True
    is_customized: bool = False


class RolesListResponse(BaseModel):
    roles: list[RoleResponse]
    permission_categories: list[PermissionCategoryResponse]


class DefaultPermissionsResponse(BaseModel):
    """Default matrix for every role plus the catalog."""

    defaults: dict[str, dict[str, bool]]
    permission_categories: list[PermissionCategoryResponse]


class MyPermissionsResponse(BaseModel):
    role: str
    permissions: dict[str, bool]
    granted: list[str]
    is_customized: bool


class UsersByRoleResponse(BaseModel):
    """Users grouped by role name (every role present, possibly empty)."""

    users_by_role: dict[str, list[UserResponse]]
    total: int


class UserRoleUpdate(BaseModel):
    """Request body for PATCH /roles/users/{user_id}/role."""

    role: Role


class RolePermissionsUpdate(BaseModel):
    """Request body for PUT /roles/permissions. Keys must be known permissions."""

    role: Role
    permissions: dict[str, StrictBool] = Field(default_factory=dict)


class RolePermissionsSaved(BaseModel):
    """Effective permissions of role after the save."""

    role: str
    permissions: dict[str, bool]
    is_customized: bool


class RoleResetRequest(BaseModel):
    role: Role


class ResetResponse(BaseModel):
    reset: int = Field(..., description="Number of override rows removed")
