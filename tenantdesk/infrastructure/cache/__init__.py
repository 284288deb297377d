"""Cache: Redis service and cache key utilities.

CacheService uses tenantdesk.core.config; key format is in keys.py.
"""

from tenantdesk.infrastructure.cache.cache_protocol import CacheProtocol
from tenantdesk.infrastructure.cache.keys import (
    pending_signup_key,
    tenant_key,
    tenant_plan_key,
)
from tenantdesk.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "pending_signup_key",
    "tenant_key",
    "tenant_plan_key",
]
