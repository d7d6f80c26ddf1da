"""Import all models to ensure they're registered with Base.metadata."""

from rbac_api.core.permissions.models import (
    Permission,
    Role,
    role_permissions,
    user_roles,
)
from rbac_api.modules.users.models import User


__all__ = [
    "Permission",
    "Role",
    "User",
    "role_permissions",
    "user_roles",
]
