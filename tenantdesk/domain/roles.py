"""Role hierarchy: Employee < Manager < Administrator < Owner.

Roles form a total order by rank. Anything that is not one of the four
roles (unknown string, empty, None) ranks 0 and is therefore denied by every
gate whose required rank is at least 1.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class Role(str, Enum):
    """Coarse privilege tier of a tenant user."""

    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    ADMINISTRATOR = "Administrator"
    OWNER = "Owner"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def values(cls) -> list[str]:
        """Return all role names, lowest rank first."""
        return [member.value for member in cls]

    @classmethod
    def by_rank_desc(cls) -> list["Role"]:
        """Return roles ordered from highest to lowest rank (UI order)."""
        return sorted(cls, key=lambda r: r.rank, reverse=True)


_RANKS: dict[Role, int] = {
    Role.EMPLOYEE: 1,
    Role.MANAGER: 2,
    Role.ADMINISTRATOR: 3,
    Role.OWNER: 4,
}

ROLE_DESCRIPTIONS: dict[Role, str] = {
    Role.OWNER: "Full system access with billing and subscription management",
    Role.ADMINISTRATOR: "Full operational access without billing management",
    Role.MANAGER: "Team and content management with limited admin access",
    Role.EMPLOYEE: "Basic access for day-to-day operations",
}

UNKNOWN_ROLE_RANK = 0


def parse_role(value: str | Role | None) -> Role | None:
    """Return the Role for value, or None when value is not a known role name."""
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def role_rank(value: str | Role | None) -> int:
    """Return the rank of value (1-4); unknown or missing roles rank 0."""
    role = parse_role(value)
    if role is None:
        return UNKNOWN_ROLE_RANK
    return role.rank


def has_min_role(actual: str | Role | None, required: str | Role | None) -> bool:
    """Return True when actual ranks at least as high as required."""
    return role_rank(actual) >= role_rank(required)


def has_any_role(
    actual: str | Role | None, acceptable: Iterable[str | Role]
) -> bool:
    """Return True when actual ranks at least as high as one of the acceptable roles.

    An empty acceptable set denies.
    """
    return any(has_min_role(actual, r) for r in acceptable)


def describe_roles(roles: Iterable[str | Role]) -> str:
    """Human-readable list of role names for error messages (e.g. 'Owner or Administrator')."""
    names = [r.value if isinstance(r, Role) else str(r) for r in roles]
    return " or ".join(names)
