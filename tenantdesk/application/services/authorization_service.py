"""Authorization service: role hierarchy gates and effective permission resolution.

Effective permissions for (role, tenant) are the role's defaults with the
tenant's stored override merged on top (override wins). Owner always holds
every permission and never reads the override store. Resolution is
recomputed per call; nothing is cached across requests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import MappingProxyType

from sqlalchemy.exc import SQLAlchemyError

from tenantdesk.application.dtos.permission import EffectivePermissionSet
from tenantdesk.application.interfaces.repositories import IPermissionOverrideRepository
from tenantdesk.application.services.override_payload import decode_override_payload
from tenantdesk.domain.exceptions import AuthorizationException, OverridePayloadError
from tenantdesk.domain.permissions import ALL_PERMISSION_KEYS, default_permissions_for
from tenantdesk.domain.roles import Role, describe_roles, has_any_role, parse_role
from tenantdesk.shared.telemetry.tracing import add_span_attributes, add_span_event, traced

logger = logging.getLogger(__name__)


def _role_name(role: str | Role | None) -> str | None:
    if isinstance(role, Role):
        return role.value
    return role or None


def _as_key_list(keys: str | Iterable[str]) -> list[str]:
    if isinstance(keys, str):
        return [keys]
    return list(keys)


def _as_role_list(required: Role | str | Iterable[Role | str]) -> list[Role | str]:
    if isinstance(required, (Role, str)):
        return [required]
    return list(required)


class AuthorizationService:
    """Centralized permission and role checking for one tenant request."""

    def __init__(self, override_repo: IPermissionOverrideRepository) -> None:
        self.override_repo = override_repo

    async def _load_override(self, role: Role, tenant_id: str) -> dict[str, bool] | None:
        """Return the decoded override, or None when absent or unusable."""
        try:
            raw = await self.override_repo.get_override(tenant_id, role.value)
        except SQLAlchemyError as e:
            logger.warning(
                "Permission override lookup failed for tenant %s role %s; using defaults: %s",
                tenant_id,
                role.value,
                e,
            )
            add_span_event("permission_override.fallback", {"reason": "store_error"})
            return None
        if raw is None:
            return None
        try:
            return decode_override_payload(raw)
        except OverridePayloadError as e:
            logger.warning(
                "Ignoring unreadable permission override for tenant %s role %s: %s",
                tenant_id,
                role.value,
                e.details.get("reason", e.message),
            )
            add_span_event("permission_override.fallback", {"reason": "unreadable"})
            return None

    @traced("authorization.get_effective_permissions")
    async def get_effective_permissions(
        self, role: str | Role | None, tenant_id: str
    ) -> EffectivePermissionSet:
        """Resolve the effective permission map for role in tenant.

        Owner: every known key True, no store access. Unknown role: empty map.
        Store errors and undecodable overrides fall back to defaults.
        """
        parsed = parse_role(role)
        role_name = parsed.value if parsed else str(role or "")
        add_span_attributes(tenant_id=tenant_id, role=role_name)
        if parsed is Role.OWNER:
            return EffectivePermissionSet(
                role=role_name,
                tenant_id=tenant_id,
                permissions=MappingProxyType(dict.fromkeys(ALL_PERMISSION_KEYS, True)),
            )
        effective = default_permissions_for(parsed)
        if parsed is None:
            return EffectivePermissionSet(
                role=role_name, tenant_id=tenant_id, permissions=MappingProxyType(effective)
            )
        override = await self._load_override(parsed, tenant_id)
        if override:
            # Stored keys no longer in the catalog are ignored.
            effective.update((k, v) for k, v in override.items() if k in effective)
        add_span_attributes(customized=bool(override))
        return EffectivePermissionSet(
            role=role_name,
            tenant_id=tenant_id,
            permissions=MappingProxyType(effective),
            is_customized=bool(override),
        )

    async def check_permission(
        self, role: str | Role | None, tenant_id: str, keys: str | Iterable[str]
    ) -> bool:
        """Return True if any of keys is granted (OR semantics)."""
        effective = await self.get_effective_permissions(role, tenant_id)
        return effective.allows_any(_as_key_list(keys))

    async def require_permission(
        self, role: str | Role | None, tenant_id: str, keys: str | Iterable[str]
    ) -> EffectivePermissionSet:
        """Return the effective set, or raise AuthorizationException when no key is granted."""
        key_list = _as_key_list(keys)
        effective = await self.get_effective_permissions(role, tenant_id)
        if not effective.allows_any(key_list):
            raise AuthorizationException(
                message=(
                    f"Insufficient permissions. Required permission: "
                    f"{' or '.join(key_list)}, your role: {_role_name(role) or 'none'}"
                ),
                required=key_list,
                role=_role_name(role),
            )
        return effective

    @staticmethod
    def check_role(
        actual: str | Role | None, required: Role | str | Iterable[Role | str]
    ) -> bool:
        """Return True when actual ranks at least as high as one of the required roles."""
        return has_any_role(actual, _as_role_list(required))

    @classmethod
    def require_role(
        cls, actual: str | Role | None, required: Role | str | Iterable[Role | str]
    ) -> None:
        """Raise AuthorizationException when actual is below every required role."""
        roles = _as_role_list(required)
        if not cls.check_role(actual, roles):
            raise AuthorizationException(
                message=(
                    f"Insufficient permissions. Required role: {describe_roles(roles)}, "
                    f"your role: {_role_name(actual) or 'none'}"
                ),
                required=[r.value if isinstance(r, Role) else str(r) for r in roles],
                role=_role_name(actual),
            )
