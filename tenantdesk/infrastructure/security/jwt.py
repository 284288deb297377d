"""Tenant-scoped access tokens.

A token names one user in one tenant: ``sub`` is the user id and
``tenant_id`` the tenant the user signed in to. Both are required on decode,
as are ``exp`` and an ``iss`` matching settings.jwt_issuer, so a token minted
by another service sharing the secret is rejected.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import cast

from jose import JWTError, jwt

from tenantdesk.core.config import get_settings


@dataclass(frozen=True)
class AccessTokenClaims:
    user_id: str
    tenant_id: str
    expires_at: datetime


def create_access_token(
    user_id: str,
    tenant_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for user_id in tenant_id.

    Lifetime defaults to settings.access_token_expire_minutes.
    """
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": user_id,
        "tenant_id": tenant_id,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return cast(
        str,
        jwt.encode(claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm),
    )


def decode_access_token(token: str) -> AccessTokenClaims:
    """Verify signature, expiry and issuer; raise ValueError on any failure."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            issuer=settings.jwt_issuer,
            options={"require_exp": True, "require_sub": True, "require_iss": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    user_id = payload.get("sub")
    tenant_id = payload.get("tenant_id")
    if not user_id or not tenant_id:
        raise ValueError("Token must carry sub and tenant_id")
    return AccessTokenClaims(
        user_id=user_id,
        tenant_id=tenant_id,
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
