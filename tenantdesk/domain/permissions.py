"""Permission catalog and default role permission matrix.

Permission keys are "<resource>.<action>" strings. The matrix below is the
only definition of role defaults: request gates, the resolver and the roles
catalog endpoint all read it. Every role row is fully enumerated over the
same key set (no implicit False).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from tenantdesk.domain.roles import Role, parse_role

PermissionKey = str


@dataclass(frozen=True, slots=True)
class PermissionDetail:
    """A single permission as shown in the roles UI."""

    key: PermissionKey
    label: str
    description: str


@dataclass(frozen=True, slots=True)
class PermissionCategory:
    """UI grouping of permissions sharing a resource prefix."""

    key: str
    label: str
    description: str
    permissions: tuple[PermissionDetail, ...]

    @property
    def keys(self) -> tuple[PermissionKey, ...]:
        return tuple(p.key for p in self.permissions)


_ACTION_LABELS: dict[str, str] = {
    "view": "View",
    "create": "Create",
    "edit": "Edit",
    "delete": "Delete",
    "manage": "Manage",
    "manage_roles": "Manage roles",
    "send": "Send",
}

# (category key, label, description, actions)
_CATEGORY_TABLE: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("users", "User Management", "Team members and their roles",
     ("view", "create", "edit", "delete", "manage_roles")),
    ("shops", "Shop Management", "Shop locations",
     ("view", "create", "edit", "delete")),
    ("company", "Company", "Company profile", ("view", "edit")),
    ("subscriptions", "Subscriptions", "Billing plan and subscription",
     ("view", "manage")),
    ("emails", "Email System", "Outgoing email and activity",
     ("view", "send", "manage")),
    ("newsletters", "Newsletters", "Newsletter drafts and sends",
     ("view", "create", "send")),
    ("campaigns", "Campaigns", "Marketing campaigns",
     ("view", "create", "manage")),
    ("contacts", "Contacts", "Email contacts and lists",
     ("view", "create", "edit", "delete")),
    ("forms", "Forms", "Forms and surveys",
     ("view", "create", "edit", "delete")),
    ("promotions", "Promotions", "Promotions and offers",
     ("view", "create", "manage")),
    ("appointments", "Appointments", "Customer appointments",
     ("view", "create", "edit", "delete")),
    ("analytics", "Analytics", "Reports and dashboards", ("view",)),
    ("settings", "Settings", "Tenant settings", ("view", "edit")),
)


def _build_categories() -> tuple[PermissionCategory, ...]:
    categories = []
    for key, label, description, actions in _CATEGORY_TABLE:
        details = tuple(
            PermissionDetail(
                key=f"{key}.{action}",
                label=_ACTION_LABELS[action],
                description=f"{_ACTION_LABELS[action]} {label.lower()}",
            )
            for action in actions
        )
        categories.append(PermissionCategory(key, label, description, details))
    return tuple(categories)


PERMISSION_CATEGORIES: tuple[PermissionCategory, ...] = _build_categories()

ALL_PERMISSION_KEYS: frozenset[PermissionKey] = frozenset(
    k for category in PERMISSION_CATEGORIES for k in category.keys
)

# Column order: Owner, Administrator, Manager, Employee.
_O, _A, _M, _E = Role.OWNER, Role.ADMINISTRATOR, Role.MANAGER, Role.EMPLOYEE
_COLUMNS = (_O, _A, _M, _E)
_MATRIX: dict[PermissionKey, tuple[bool, bool, bool, bool]] = {
    "users.view": (True, True, True, False),
    "users.create": (True, True, False, False),
    "users.edit": (True, True, False, False),
    "users.delete": (True, True, False, False),
    "users.manage_roles": (True, True, False, False),
    "shops.view": (True, True, True, True),
    "shops.create": (True, True, False, False),
    "shops.edit": (True, True, True, False),
    "shops.delete": (True, True, False, False),
    "company.view": (True, True, True, True),
    "company.edit": (True, True, False, False),
    "subscriptions.view": (True, True, False, False),
    "subscriptions.manage": (True, False, False, False),
    "emails.view": (True, True, True, True),
    "emails.send": (True, True, True, False),
    "emails.manage": (True, True, False, False),
    "newsletters.view": (True, True, True, True),
    "newsletters.create": (True, True, True, False),
    "newsletters.send": (True, True, True, False),
    "campaigns.view": (True, True, True, True),
    "campaigns.create": (True, True, True, False),
    "campaigns.manage": (True, True, False, False),
    "contacts.view": (True, True, True, True),
    "contacts.create": (True, True, True, True),
    "contacts.edit": (True, True, True, False),
    "contacts.delete": (True, True, False, False),
    "forms.view": (True, True, True, True),
    "forms.create": (True, True, True, False),
    "forms.edit": (True, True, True, False),
    "forms.delete": (True, True, False, False),
    "promotions.view": (True, True, True, True),
    "promotions.create": (True, True, True, False),
    "promotions.manage": (True, True, False, False),
    "appointments.view": (True, True, True, True),
    "appointments.create": (True, True, True, True),
    "appointments.edit": (True, True, True, False),
    "appointments.delete": (True, True, True, False),
    "analytics.view": (True, True, True, False),
    "settings.view": (True, True, True, False),
    "settings.edit": (True, False, False, False),
}

if set(_MATRIX) != ALL_PERMISSION_KEYS:  # pragma: no cover
    raise RuntimeError("Default permission matrix does not match the permission catalog")

DEFAULT_ROLE_PERMISSIONS: Mapping[Role, Mapping[PermissionKey, bool]] = MappingProxyType(
    {
        role: MappingProxyType({key: row[i] for key, row in _MATRIX.items()})
        for i, role in enumerate(_COLUMNS)
    }
)


def is_known_permission(key: str) -> bool:
    """Return True if key is in the permission catalog."""
    return key in ALL_PERMISSION_KEYS


def unknown_permissions(keys: Iterable[str]) -> list[str]:
    """Return the keys not present in the catalog, sorted."""
    return sorted(k for k in set(keys) if not is_known_permission(k))


def default_permissions_for(role: str | Role | None) -> dict[PermissionKey, bool]:
    """Return a mutable copy of the default map for role; unknown roles get {}."""
    parsed = parse_role(role)
    if parsed is None:
        return {}
    return dict(DEFAULT_ROLE_PERMISSIONS[parsed])
