"""Error handling module with RFC 7807 Problem Details."""

from rbac_api.core.errors.exceptions import (
    AppException,
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    IdentityNotFoundError,
    InfrastructureError,
    InsufficientPermissionsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from rbac_api.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    problem_response,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "AuthenticationError",
    "ConfigurationError",
    "ConflictError",
    # Handlers
    "FieldError",
    "IdentityNotFoundError",
    "InfrastructureError",
    "InsufficientPermissionsError",
    "NotFoundError",
    "ProblemDetail",
    "UnauthenticatedError",
    "ValidationError",
    "problem_response",
    "register_exception_handlers",
]
