"""Application interfaces (ports) implemented by infrastructure."""

from tenantdesk.application.interfaces.repositories import (
    ILimitsRepository,
    IPermissionOverrideRepository,
    ITenantRepository,
    IUserRepository,
)

__all__ = [
    "ILimitsRepository",
    "IPermissionOverrideRepository",
    "ITenantRepository",
    "IUserRepository",
]
