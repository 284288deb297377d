"""Role permission override repository (one row per tenant and role)."""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdesk.infrastructure.persistence.models.permission_override import (
    RolePermissionOverride,
)
from tenantdesk.infrastructure.persistence.repositories.base import BaseRepository


class PermissionOverrideRepository(BaseRepository[RolePermissionOverride]):
    """Stores raw override payloads; decoding is the caller's concern."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RolePermissionOverride)

    async def get_override(self, tenant_id: str, role: str) -> Any | None:
        """Return the stored payload, or None.

        Runs in a savepoint: a failed read (e.g. the table is not provisioned)
        is rolled back alone and the request's transaction stays usable.
        """
        async with self.db.begin_nested():
            result = await self.db.execute(
                select(RolePermissionOverride.payload).where(
                    RolePermissionOverride.tenant_id == tenant_id,
                    RolePermissionOverride.role == role,
                )
            )
            return result.scalar_one_or_none()

    async def upsert_override(
        self,
        tenant_id: str,
        role: str,
        payload: dict[str, Any],
        updated_by: str | None = None,
    ) -> None:
        """Insert the row or replace its payload in one statement (ON CONFLICT on tenant and role)."""
        version = int(payload.get("version", 0))
        stmt = pg_insert(RolePermissionOverride).values(
            tenant_id=tenant_id,
            role=role,
            payload=payload,
            schema_version=version,
            updated_by=updated_by,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[RolePermissionOverride.tenant_id, RolePermissionOverride.role],
            set_={
                "payload": stmt.excluded.payload,
                "schema_version": stmt.excluded.schema_version,
                "updated_by": stmt.excluded.updated_by,
                "updated_at": func.now(),
            },
        )
        await self.db.execute(stmt)

    async def delete_overrides(self, tenant_id: str, role: str | None = None) -> int:
        stmt = delete(RolePermissionOverride).where(
            RolePermissionOverride.tenant_id == tenant_id
        )
        if role is not None:
            stmt = stmt.where(RolePermissionOverride.role == role)
        result = await self.db.execute(stmt)
        return result.rowcount or 0
