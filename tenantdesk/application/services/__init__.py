"""Application services: authorization, overrides, role assignment, limits, signup."""

from tenantdesk.application.services.authorization_service import AuthorizationService
from tenantdesk.application.services.limits_service import FREE_PLAN, LimitsService
from tenantdesk.application.services.pending_signup_store import PendingSignupStore
from tenantdesk.application.services.permission_override_service import (
    PermissionOverrideService,
)
from tenantdesk.application.services.role_assignment_service import RoleAssignmentService
from tenantdesk.application.services.signup_service import SignupService
from tenantdesk.application.services.team_service import TeamService

__all__ = [
    "AuthorizationService",
    "FREE_PLAN",
    "LimitsService",
    "PendingSignupStore",
    "PermissionOverrideService",
    "RoleAssignmentService",
    "SignupService",
    "TeamService",
]
