"""Tenant repository with optional caching. Returns application DTOs."""

from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.application.dtos.tenant import TenantResult
from tenantdesk.domain.enums import TenantStatus
from tenantdesk.domain.exceptions import ValidationException
from tenantdesk.infrastructure.cache.cache_protocol import CacheProtocol
from tenantdesk.infrastructure.cache.keys import tenant_key
from tenantdesk.infrastructure.persistence.models.tenant import Tenant
from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, hyphen-separated slug for a company name ('tenant' when empty)."""
    return _SLUG_STRIP.sub("-", name.lower()).strip("-") or "tenant"


def _tenant_to_result(t: Tenant) -> TenantResult:
    return TenantResult(id=t.id, name=t.name, slug=t.slug, status=t.status)


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository. Optional cache (inject cache_ttl). Uses tenant_key."""

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        cache_ttl: int = 900,
    ) -> None:
        super().__init__(db, Tenant)
        self.cache = cache_service
        self.cache_ttl = cache_ttl

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Get tenant by ID, from cache if available."""
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(tenant_key(tenant_id))
            if cached is not None:
                return TenantResult(**cached)
        tenant = await super().get_by_id(tenant_id)
        if tenant is None:
            return None
        result = _tenant_to_result(tenant)
        if self.cache and self.cache.is_available():
            await self.cache.set(
                tenant_key(tenant_id),
                {"id": result.id, "name": result.name, "slug": result.slug, "status": result.status},
                ttl=self.cache_ttl,
            )
        return result

    async def _slug_taken(self, slug: str) -> bool:
        result = await self.db.execute(select(Tenant.id).where(Tenant.slug == slug))
        return result.first() is not None

    async def create_tenant(self, name: str) -> TenantResult:
        """Create an active tenant with a unique slug derived from name."""
        base = slugify(name)
        slug = base
        suffix = 1
        while await self._slug_taken(slug):
            suffix += 1
            slug = f"{base}-{suffix}"
        tenant = Tenant(name=name, slug=slug, status=TenantStatus.ACTIVE.value)
        try:
            created = await self.create(tenant)
        except IntegrityError as e:
            raise ValidationException(f"Tenant slug already exists: {slug}", field="name") from e
        return _tenant_to_result(created)
