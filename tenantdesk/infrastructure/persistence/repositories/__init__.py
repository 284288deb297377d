"""Persistence repositories. Re-exports for dependency injection."""

from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository
from tenantdesk.infrastructure.persistence.repositories.limits_repo import LimitsRepository
from tenantdesk.infrastructure.persistence.repositories.permission_override_repo import (
    PermissionOverrideRepository,
)
from tenantdesk.infrastructure.persistence.repositories.shop_repo import ShopRepository
from tenantdesk.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from tenantdesk.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "LimitsRepository",
    "PermissionOverrideRepository",
    "ShopRepository",
    "TenantRepository",
    "UserRepository",
]
