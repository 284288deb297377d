"""Per-tenant, per-role permission override ORM model."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tenantdesk.infrastructure.persistence.database import Base
from tenantdesk.infrastructure.persistence.models.mixins import MultiTenantModel


class RolePermissionOverride(MultiTenantModel, Base):
    """Stored diff from a role's defaults for one tenant.

    Table: role_permission_override. At most one row per (tenant_id, role).
    payload holds a versioned document ({"version": n, "permissions": {...}});
    schema_version mirrors payload["version"] for queries.
    """

    __tablename__ = "role_permission_override"

    role: Mapped[str] = mapped_column(String, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "role", name="uq_role_permission_override_tenant_role"),
    )
