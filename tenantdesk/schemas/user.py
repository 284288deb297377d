"""User API schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tenantdesk.domain.roles import Role
from tenantdesk.schemas.tenant import TenantResponse


class UserCreateRequest(BaseModel):
    """Request body for adding a team member to the caller's tenant."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    role: Role = Role.EMPLOYEE
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    email: str
    role: str
    is_active: bool
    first_name: str | None = None
    last_name: str | None = None
    display_name: str


class MeResponse(UserResponse):
    """The authenticated user together with their tenant."""

    tenant: TenantResponse
