"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from tenantdesk.api.v1.dependencies.
"""

from fastapi import APIRouter

from tenantdesk.api.v1.endpoints import (
    auth,
    health,
    roles,
    shops,
    signup,
    subscription,
    tenant_limits,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(signup.router, prefix="/signup", tags=["signup"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(shops.router, prefix="/shops", tags=["shops"])
api_router.include_router(
    subscription.router, prefix="/subscription", tags=["subscription"]
)
api_router.include_router(
    tenant_limits.router, prefix="/tenant-limits", tags=["tenant-limits"]
)
