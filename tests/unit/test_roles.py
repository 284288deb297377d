"""Tests for the role hierarchy (rank, parsing, min-role and any-role checks)."""

import pytest

from tenantdesk.domain.roles import (
    ROLE_DESCRIPTIONS,
    Role,
    describe_roles,
    has_any_role,
    has_min_role,
    parse_role,
    role_rank,
)


def test_ranks_are_strictly_ordered() -> None:
    """Employee < Manager < Administrator < Owner."""
    assert [role_rank(r) for r in Role] == [1, 2, 3, 4]
    assert Role.by_rank_desc() == [Role.OWNER, Role.ADMINISTRATOR, Role.MANAGER, Role.EMPLOYEE]


@pytest.mark.parametrize("value", [None, "", "owner", "Superuser", "OWNER "])
def test_unknown_roles_rank_zero(value: str | None) -> None:
    """Anything that is not an exact role name ranks 0."""
    assert parse_role(value) is None
    assert role_rank(value) == 0


def test_parse_role_accepts_names_and_members() -> None:
    assert parse_role("Manager") is Role.MANAGER
    assert parse_role(Role.OWNER) is Role.OWNER


def test_has_min_role() -> None:
    assert has_min_role("Owner", Role.ADMINISTRATOR)
    assert has_min_role("Administrator", "Administrator")
    assert not has_min_role("Manager", "Administrator")
    assert not has_min_role("Hacker", "Employee")


def test_has_any_role_uses_lowest_acceptable_rank() -> None:
    """Manager passes a gate accepting Administrator or Manager; Employee does not."""
    acceptable = [Role.ADMINISTRATOR, Role.MANAGER]
    assert has_any_role("Manager", acceptable)
    assert has_any_role("Owner", acceptable)
    assert not has_any_role("Employee", acceptable)


def test_has_any_role_empty_set_denies() -> None:
    assert not has_any_role("Owner", [])


def test_describe_roles_joins_with_or() -> None:
    assert describe_roles([Role.OWNER, "Administrator"]) == "Owner or Administrator"


def test_every_role_has_a_description() -> None:
    assert set(ROLE_DESCRIPTIONS) == set(Role)
    assert Role.values() == ["Employee", "Manager", "Administrator", "Owner"]
