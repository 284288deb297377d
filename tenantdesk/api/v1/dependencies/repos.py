"""Repository dependencies (composition root).

Read repos share the request session from get_db; write repos use
get_db_transactional so the request commits or rolls back as a unit.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.core.config import get_settings
from tenantdesk.infrastructure.persistence.database import get_db, get_db_transactional
from tenantdesk.infrastructure.persistence.repositories import (
    LimitsRepository,
    PermissionOverrideRepository,
    ShopRepository,
    TenantRepository,
    UserRepository,
)


def get_cache(request: Request):
    """Cache set in app lifespan, or None when Redis is disabled."""
    return getattr(request.app.state, "cache", None)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for read operations."""
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    """User repository for writes (transactional)."""
    return UserRepository(db)


async def get_override_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionOverrideRepository:
    return PermissionOverrideRepository(db)


async def get_override_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PermissionOverrideRepository:
    return PermissionOverrideRepository(db)


async def get_limits_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LimitsRepository:
    return LimitsRepository(db)


async def get_limits_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> LimitsRepository:
    return LimitsRepository(db)


async def get_tenant_repo(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantRepository:
    """Tenant repository with the shared cache (read path)."""
    return TenantRepository(
        db, get_cache(request), cache_ttl=get_settings().cache_ttl_tenants
    )


async def get_tenant_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> TenantRepository:
    """Tenant repository for signup; no cache on the write path."""
    return TenantRepository(db)


async def get_shop_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ShopRepository:
    return ShopRepository(db)


async def get_shop_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ShopRepository:
    return ShopRepository(db)
