"""Domain enumerations for tenantdesk.

Enums represent fixed sets of domain values (e.g. tenant status). The role
hierarchy lives in tenantdesk.domain.roles because it carries ranking logic.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status.

    Determines whether a tenant can sign in and accept API traffic.
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class SubscriptionStatus(_ValuesMixin, str, Enum):
    """Billing subscription status as reported by the payment provider."""

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    INCOMPLETE = "incomplete"
    CANCELED = "canceled"

    @classmethod
    def grants_plan(cls) -> frozenset[str]:
        """Statuses under which the subscribed plan's limits apply."""
        return frozenset({cls.ACTIVE.value, cls.TRIALING.value, cls.PAST_DUE.value})


class PlanFeature(_ValuesMixin, str, Enum):
    """Plan-gated features (checked by require_plan_feature)."""

    USERS_MANAGEMENT = "users_management"
    ROLES_MANAGEMENT = "roles_management"


class LimitEventType(_ValuesMixin, str, Enum):
    """Recorded changes to a tenant's effective limits."""

    LIMIT_INCREASED = "limit_increased"
    LIMIT_DECREASED = "limit_decreased"
