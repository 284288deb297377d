"""Auth and signup API schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login. Email is unique across tenants."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Request body for owner signup (creates the tenant)."""

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    company_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Falls back to the name stored via /signup/company-name",
    )
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class CompanyNameRequest(BaseModel):
    """Request body for POST /signup/company-name (held for a short TTL)."""

    email: EmailStr
    company_name: str = Field(..., min_length=1, max_length=255)


class CompanyNameResponse(BaseModel):
    stored: bool = True
    expires_in: int


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class RegisterResponse(TokenResponse):
    """Owner signup response: token plus the new tenant and owner ids."""

    tenant_id: str
    tenant_name: str
    tenant_slug: str
    user_id: str
