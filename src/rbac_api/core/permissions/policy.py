"""Operation permission table.

Each protected operation is named by its FastAPI route name and mapped to
the set of permissions a caller must hold, all of them. Operations that are
not in the table are public. An empty set means the caller only has to be
authenticated.
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from fastapi import FastAPI
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute

from rbac_api.core.errors import ConfigurationError


def iter_api_routes(routes: Iterable[BaseRoute]) -> Iterator[APIRoute]:
    """Yield every endpoint route, descending into mounts and nested routers."""
    for route in routes:
        if isinstance(route, APIRoute):
            yield route
        else:
            yield from iter_api_routes(getattr(route, "routes", None) or ())


class OperationPolicy:
    """Immutable mapping of operation name to required permissions.

    Usage:
        policy = OperationPolicy({"list_users": {"user:read"}})
        policy.validate_against(app)
        policy.required_for("list_users")  # frozenset({"user:read"})
    """

    def __init__(self, rules: Mapping[str, Iterable[str]]) -> None:
        self._rules: Mapping[str, frozenset[str]] = MappingProxyType(
            {operation: frozenset(perms) for operation, perms in rules.items()}
        )

    @property
    def rules(self) -> Mapping[str, frozenset[str]]:
        """Read-only view of the table."""
        return self._rules

    def required_for(self, operation: str | None) -> frozenset[str] | None:
        """Return the permissions an operation requires.

        Returns:
            The required set, or None if the operation is public
        """
        if operation is None:
            return None
        return self._rules.get(operation)

    def validate_against(self, app: FastAPI) -> None:
        """Fail if the table names an operation the app does not expose.

        Raises:
            ConfigurationError: If an entry has no matching route
        """
        route_names = {route.name for route in iter_api_routes(app.router.routes)}
        unknown = sorted(set(self._rules) - route_names)
        if unknown:
            raise ConfigurationError(
                f"Permission table names unknown operations: {', '.join(unknown)}",
                details={"unknown_operations": unknown},
            )

    def __repr__(self) -> str:
        return f"<OperationPolicy({len(self._rules)} operations)>"


DEFAULT_POLICY = OperationPolicy(
    {
        # Auth
        "read_current_user": set(),
        # Users
        "list_users": {"user:read"},
        "get_user": {"user:read"},
        "assign_role": {"role:write"},
        "remove_role": {"role:write"},
        # Roles and permissions
        "list_roles": {"role:read"},
        "get_role": {"role:read"},
        "list_permissions": {"role:read"},
    }
)
