"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes (used with :id or :tenant_id etc.)
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_TENANT_PLAN = "tenant_plan"
CACHE_PREFIX_PENDING_SIGNUP = "pending_signup"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
