"""Core services and cross-cutting concerns."""

from rbac_api.core.database import Base, Database, get_db
from rbac_api.core.errors import (
    AppException,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
    register_exception_handlers,
)


__all__ = [
    # Errors
    "AppException",
    # Database
    "Base",
    "ConflictError",
    "Database",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
    "get_db",
    "register_exception_handlers",
]
