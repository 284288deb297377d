"""Security: JWT tokens and password hashing."""

from tenantdesk.infrastructure.security.jwt import (
    AccessTokenClaims,
    create_access_token,
    decode_access_token,
)
from tenantdesk.infrastructure.security.password import (
    get_password_hash,
    verify_password,
)

__all__ = [
    "AccessTokenClaims",
    "create_access_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",
]
