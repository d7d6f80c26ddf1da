"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
None of them are retried inside the application; each one is the terminal
outcome of the request that raised it.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input is missing or malformed.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "email", "message": "Invalid email format"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a create would violate a uniqueness constraint.

    Example:
        raise ConflictError("Email already registered")
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class AuthenticationError(AppException):
    """Raised when login credentials are rejected.

    Unknown email and wrong password produce the same error so callers
    cannot enumerate accounts.
    """

    message = "Invalid email or password"
    error_code = "invalid_credentials"
    status_code = 401


class UnauthenticatedError(AppException):
    """Raised when a request carries no token or an invalid/expired one.

    Example:
        raise UnauthenticatedError("Invalid or expired token", error_code="invalid_token")
    """

    message = "Authentication required"
    error_code = "unauthenticated"
    status_code = 401


class IdentityNotFoundError(AppException):
    """Raised when a valid token names a user that no longer exists.

    This is an authorization failure, not a retryable condition.
    """

    message = "Access forbidden"
    error_code = "identity_not_found"
    status_code = 403


class InsufficientPermissionsError(AppException):
    """Raised when the caller's roles do not grant every required permission.

    Example:
        raise InsufficientPermissionsError(
            details={"required_permissions": ["role:write"]}
        )
    """

    message = "Insufficient permissions"
    error_code = "permission_denied"
    status_code = 403


class InfrastructureError(AppException):
    """Raised when persistence or another dependency fails or times out.

    Example:
        raise InfrastructureError("Database unavailable")
    """

    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503


class ConfigurationError(InfrastructureError):
    """Raised at startup when required configuration is missing or invalid."""

    message = "Invalid configuration"
    error_code = "configuration_error"
    status_code = 500
