"""Cache key builders. Single place for key format.

Key components (tenant_id, email) must not contain CACHE_KEY_SEP to avoid
ambiguous or colliding keys.
"""

from tenantdesk.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_PENDING_SIGNUP,
    CACHE_PREFIX_TENANT,
    CACHE_PREFIX_TENANT_PLAN,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def tenant_key(tenant_id: str) -> str:
    """Cache key for tenant by ID."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}id{CACHE_KEY_SEP}{tenant_id}"


def tenant_plan_key(tenant_id: str) -> str:
    """Cache key for a tenant's resolved subscription plan."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_TENANT_PLAN}{CACHE_KEY_SEP}{tenant_id}"


def pending_signup_key(email: str) -> str:
    """Cache key for pending signup data; email must already be normalized."""
    _validate_key_component(email, "email")
    return f"{CACHE_PREFIX_PENDING_SIGNUP}{CACHE_KEY_SEP}{email}"
