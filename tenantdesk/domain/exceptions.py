"""Domain exceptions for tenantdesk.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TenantDeskException(Exception):
    """Base exception for all tenantdesk errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body: message first, then machine-readable code and details."""
        return {
            "message": self.message,
            "error": self.error_code,
            "details": self.details,
        }


class ValidationException(TenantDeskException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(TenantDeskException):
    """Raised when authentication fails (no session, invalid or expired token)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(TenantDeskException):
    """Raised when the caller's role or effective permissions do not admit the operation.

    The message names what was required and the caller's role; it never
    carries tenant override data.
    """

    def __init__(
        self,
        message: str = "Insufficient permissions",
        required: list[str] | None = None,
        role: str | None = None,
    ) -> None:
        """Initialize with message and optional required keys/roles and caller role.

        Args:
            message: Human-readable message returned to the caller.
            required: Permission keys or role names that would have admitted the call.
            role: The caller's role as stored on the user.
        """
        details: dict[str, Any] = {}
        if required:
            details["required"] = list(required)
        if role is not None:
            details["role"] = role
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(TenantDeskException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'user', 'tenant').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TenantNotFoundException(TenantDeskException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class RoleChangeException(TenantDeskException):
    """Raised when a role change breaks a business rule (own role, last owner)."""

    def __init__(self, message: str, user_id: str | None = None) -> None:
        details = {"user_id": user_id} if user_id else {}
        super().__init__(message, "ROLE_CHANGE_REJECTED", details)


class LimitExceededException(TenantDeskException):
    """Raised when creating a resource would exceed the tenant's plan or custom limit."""

    def __init__(
        self,
        resource: str,
        current: int,
        limit: int | None,
        plan_name: str,
        message: str | None = None,
    ) -> None:
        """Initialize with the counted resource and its limit.

        Args:
            resource: Limited resource ('users', 'shops', 'emails').
            current: Current usage.
            limit: Effective limit (None means unlimited and is never raised).
            plan_name: Plan the limit came from.
            message: Optional override for the default message.
        """
        super().__init__(
            message
            or f"{resource.capitalize()} limit reached ({current}/{limit}) for plan {plan_name}",
            "LIMIT_EXCEEDED",
            {
                "resource": resource,
                "current": current,
                "limit": limit,
                "plan_name": plan_name,
            },
        )


class PlanFeatureUnavailableException(TenantDeskException):
    """Raised when the tenant's plan does not include a gated feature."""

    def __init__(self, feature: str, plan_name: str) -> None:
        super().__init__(
            f"Your {plan_name} plan does not include {feature.replace('_', ' ')}",
            "PLAN_FEATURE_UNAVAILABLE",
            {"feature": feature, "plan_name": plan_name},
        )


class OverridePayloadError(TenantDeskException):
    """Raised when a stored permission override document cannot be decoded."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Invalid permission override payload: {reason}",
            "OVERRIDE_PAYLOAD_INVALID",
            {"reason": reason},
        )


class CacheUnavailableException(TenantDeskException):
    """Raised when an operation requires the cache but it is not connected."""

    def __init__(self, operation: str | None = None) -> None:
        super().__init__(
            "Temporary storage is unavailable; please retry shortly.",
            "SERVICE_UNAVAILABLE",
            {"operation": operation} if operation else {},
        )


class SqlNotConfiguredException(TenantDeskException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
