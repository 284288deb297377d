"""FastAPI dependencies: repositories, services, and auth gates.

Routes depend only on these; no manual repo or service construction.
"""

from .auth import (
    get_current_user,
    get_current_user_optional,
    require_permission,
    require_plan_feature,
    require_role,
)
from .repos import (
    get_cache,
    get_limits_repo,
    get_limits_repo_for_write,
    get_override_repo,
    get_override_repo_for_write,
    get_shop_repo,
    get_shop_repo_for_write,
    get_tenant_repo,
    get_tenant_repo_for_write,
    get_user_repo,
    get_user_repo_for_write,
)
from .services import (
    get_authorization_service,
    get_limits_service,
    get_limits_service_for_write,
    get_pending_signup_store,
    get_permission_override_service,
    get_role_assignment_service,
    get_signup_service,
    get_team_service,
)

__all__ = [
    "get_authorization_service",
    "get_cache",
    "get_current_user",
    "get_current_user_optional",
    "get_limits_repo",
    "get_limits_repo_for_write",
    "get_limits_service",
    "get_limits_service_for_write",
    "get_override_repo",
    "get_override_repo_for_write",
    "get_pending_signup_store",
    "get_permission_override_service",
    "get_role_assignment_service",
    "get_shop_repo",
    "get_shop_repo_for_write",
    "get_signup_service",
    "get_team_service",
    "get_tenant_repo",
    "get_tenant_repo_for_write",
    "get_user_repo",
    "get_user_repo_for_write",
    "require_permission",
    "require_plan_feature",
    "require_role",
]
