"""Database layer - session management, base models, and mixins."""

from rbac_api.core.database.base import Base, TimestampMixin, UUIDMixin
from rbac_api.core.database.session import (
    TIMEOUT_INFO_KEY,
    Database,
    bounded,
    get_database,
    get_db,
    translate_db_errors,
)


__all__ = [
    "Base",
    "Database",
    "TIMEOUT_INFO_KEY",
    "TimestampMixin",
    "UUIDMixin",
    "bounded",
    "get_database",
    "get_db",
    "translate_db_errors",
]
