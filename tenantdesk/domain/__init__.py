"""Domain layer: roles, permission catalog, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tenantdesk.domain.enums import SubscriptionStatus, TenantStatus
from tenantdesk.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    LimitExceededException,
    ResourceNotFoundException,
    TenantDeskException,
    ValidationException,
)
from tenantdesk.domain.roles import Role, has_any_role, has_min_role, role_rank

__all__ = [
    # Enums
    "Role",
    "SubscriptionStatus",
    "TenantStatus",
    # Role hierarchy
    "has_any_role",
    "has_min_role",
    "role_rank",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "LimitExceededException",
    "ResourceNotFoundException",
    "TenantDeskException",
    "ValidationException",
]
