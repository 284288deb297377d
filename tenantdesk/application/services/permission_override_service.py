"""Write path for tenant role permission overrides (save, reset one, reset all)."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tenantdesk.application.dtos.user import UserResult
from tenantdesk.application.interfaces.repositories import IPermissionOverrideRepository
from tenantdesk.application.services.override_payload import encode_override_payload
from tenantdesk.domain.exceptions import AuthorizationException, ValidationException
from tenantdesk.domain.permissions import default_permissions_for, unknown_permissions
from tenantdesk.domain.roles import Role, parse_role

logger = logging.getLogger(__name__)


def _require_owner(actor: UserResult) -> None:
    if parse_role(actor.role) is not Role.OWNER:
        raise AuthorizationException(
            message="Only the account owner can customize role permissions",
            required=[Role.OWNER.value],
            role=actor.role,
        )


def _customizable_role(role: str | Role) -> Role:
    parsed = parse_role(role)
    if parsed is None:
        raise ValidationException(f"Invalid role: {role}", field="role")
    if parsed is Role.OWNER:
        raise ValidationException(
            "Owner permissions cannot be customized", field="role"
        )
    return parsed


def diff_from_defaults(role: Role, permissions: Mapping[str, bool]) -> dict[str, bool]:
    """Return only the entries whose value differs from role's default."""
    defaults = default_permissions_for(role)
    return {k: v for k, v in permissions.items() if defaults.get(k) != v}


class PermissionOverrideService:
    """Owner-only mutations of the override store."""

    def __init__(self, override_repo: IPermissionOverrideRepository) -> None:
        self.override_repo = override_repo

    async def save_role_permissions(
        self,
        tenant_id: str,
        role: str | Role,
        permissions: Mapping[str, bool],
        actor: UserResult,
    ) -> dict[str, bool]:
        """Store role's permissions as a diff from defaults; return the new effective map.

        An empty diff deletes the tenant's override row for the role.
        """
        _require_owner(actor)
        target = _customizable_role(role)
        unknown = unknown_permissions(permissions)
        if unknown:
            raise ValidationException(
                f"Unknown permission keys: {', '.join(unknown)}", field="permissions"
            )
        diff = diff_from_defaults(target, permissions)
        if diff:
            await self.override_repo.upsert_override(
                tenant_id, target.value, encode_override_payload(diff), updated_by=actor.id
            )
        else:
            await self.override_repo.delete_overrides(tenant_id, target.value)
        logger.info(
            "Role permissions saved: tenant=%s role=%s overridden=%d by=%s",
            tenant_id,
            target.value,
            len(diff),
            actor.id,
        )
        effective = default_permissions_for(target)
        effective.update(diff)
        return effective

    async def reset_role(self, tenant_id: str, role: str | Role, actor: UserResult) -> int:
        """Remove the tenant's override for role; return rows deleted (0 when already default)."""
        _require_owner(actor)
        target = _customizable_role(role)
        deleted = await self.override_repo.delete_overrides(tenant_id, target.value)
        logger.info(
            "Role permissions reset: tenant=%s role=%s deleted=%d by=%s",
            tenant_id,
            target.value,
            deleted,
            actor.id,
        )
        return deleted

    async def reset_all(self, tenant_id: str, actor: UserResult) -> int:
        """Remove every override in the tenant; return rows deleted."""
        _require_owner(actor)
        deleted = await self.override_repo.delete_overrides(tenant_id)
        logger.info(
            "All role permissions reset: tenant=%s deleted=%d by=%s",
            tenant_id,
            deleted,
            actor.id,
        )
        return deleted
