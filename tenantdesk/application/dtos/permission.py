"""DTOs for permission resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class EffectivePermissionSet:
    """Resolved permission map for one role in one tenant (request-scoped).

    permissions is read-only. Keys absent from the map are denied.
    is_customized is True when a tenant override was merged in.
    """

    role: str
    tenant_id: str
    permissions: Mapping[str, bool]
    is_customized: bool = False

    def allows(self, key: str) -> bool:
        return bool(self.permissions.get(key, False))

    def allows_any(self, keys: Iterable[str]) -> bool:
        """OR across keys; an empty collection denies."""
        return any(self.allows(k) for k in keys)

    def granted(self) -> list[str]:
        """Sorted list of keys that evaluate to True."""
        return sorted(k for k, v in self.permissions.items() if v)
