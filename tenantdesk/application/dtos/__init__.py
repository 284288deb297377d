"""Application DTOs: read-models passed between repositories, services and API."""

from tenantdesk.application.dtos.limits import (
    LimitEvent,
    LimitsSummary,
    TenantLimitsResult,
    TenantPlan,
    UsageLimit,
)
from tenantdesk.application.dtos.permission import EffectivePermissionSet
from tenantdesk.application.dtos.tenant import RegistrationResult, TenantResult
from tenantdesk.application.dtos.user import UserResult

__all__ = [
    "EffectivePermissionSet",
    "LimitEvent",
    "LimitsSummary",
    "RegistrationResult",
    "TenantLimitsResult",
    "TenantPlan",
    "TenantResult",
    "UsageLimit",
    "UserResult",
]
