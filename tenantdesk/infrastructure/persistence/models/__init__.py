"""Persistence models: ORM entities and mixins."""

from tenantdesk.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
)
from tenantdesk.infrastructure.persistence.models.permission_override import (
    RolePermissionOverride,
)
from tenantdesk.infrastructure.persistence.models.subscription import (
    Subscription,
    SubscriptionPlan,
    TenantLimitEvent,
    TenantLimits,
)
from tenantdesk.infrastructure.persistence.models.tenant import Tenant
from tenantdesk.infrastructure.persistence.models.usage import EmailSend, Shop
from tenantdesk.infrastructure.persistence.models.user import User

__all__ = [
    "Tenant",
    "User",
    "RolePermissionOverride",
    "SubscriptionPlan",
    "Subscription",
    "TenantLimits",
    "TenantLimitEvent",
    "Shop",
    "EmailSend",
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "MultiTenantModel",
]
