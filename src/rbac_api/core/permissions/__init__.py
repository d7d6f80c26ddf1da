"""Role-based access control: models, decision engine and enforcement.

Import the decision engine from ``checker`` and request enforcement from
``enforcement``. They depend on the users module, which imports the
models below.
"""

from rbac_api.core.permissions.models import (
    Permission,
    Role,
    role_permissions,
    user_roles,
)
from rbac_api.core.permissions.policy import DEFAULT_POLICY, OperationPolicy


__all__ = [
    "DEFAULT_POLICY",
    "OperationPolicy",
    "Permission",
    "Role",
    "role_permissions",
    "user_roles",
]
