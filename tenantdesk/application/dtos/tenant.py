"""DTOs for tenant use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model."""

    id: str
    name: str
    slug: str
    status: str


@dataclass(frozen=True)
class RegistrationResult:
    """Result of owner signup: new tenant plus its first (Owner) user."""

    tenant: TenantResult
    owner_id: str
    owner_email: str
    access_token: str
