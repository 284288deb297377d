"""Shop repository (tenant-scoped)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.infrastructure.persistence.models.usage import Shop
from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository


class ShopRepository(BaseRepository[Shop]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Shop)

    async def create_shop(self, tenant_id: str, name: str) -> Shop:
        return await self.create(Shop(tenant_id=tenant_id, name=name, is_active=True))

    async def list_by_tenant(self, tenant_id: str) -> list[Shop]:
        result = await self.db.execute(
            select(Shop).where(Shop.tenant_id == tenant_id).order_by(Shop.name)
        )
        return list(result.scalars().all())
