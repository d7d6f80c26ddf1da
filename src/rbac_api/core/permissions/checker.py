"""Permission checking logic.

This module decides whether a user may perform an operation, based only
on the permissions granted by the roles the user holds. There is no
wildcard matching, no role inheritance and no superuser bypass.
"""

from collections.abc import Iterable
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_api.core.errors import IdentityNotFoundError, InsufficientPermissionsError
from rbac_api.modules.users.repos import UserRepository


logger = structlog.get_logger()


class PermissionChecker:
    """Service for checking user permissions.

    Stateless apart from the session it is given; nothing is cached across
    calls, so a role change is visible to the next check.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user_permissions(self, user_id: UUID) -> set[str] | None:
        """Get all permissions for a user.

        Loads the user, their roles and the roles' permissions in one
        logical fetch.

        Args:
            user_id: The user's UUID

        Returns:
            Set of permission names, or None if the user does not exist
        """
        user = await UserRepository(self.session).get_with_permissions(user_id)
        if user is None:
            return None

        permissions: set[str] = set()
        for role in user.roles:
            permissions |= role.permission_names
        return permissions

    async def authorize(self, user_id: UUID, required: Iterable[str]) -> None:
        """Allow the request or raise.

        Args:
            user_id: The authenticated user's UUID
            required: Permission names that must all be held

        Raises:
            IdentityNotFoundError: If the user no longer exists
            InsufficientPermissionsError: If any required permission is missing
        """
        required = frozenset(required)
        if not required:
            return

        granted = await self.get_user_permissions(user_id)
        if granted is None:
            logger.warning("authorization_identity_missing", user_id=str(user_id))
            raise IdentityNotFoundError()

        if not required <= granted:
            logger.warning(
                "authorization_denied",
                user_id=str(user_id),
                required_permissions=sorted(required),
            )
            raise InsufficientPermissionsError(
                details={"required_permissions": sorted(required)}
            )

    async def has_permission(self, user_id: UUID, permission: str) -> bool:
        """Check if a user has a specific permission.

        Args:
            user_id: The user's UUID
            permission: Permission name, e.g. "user:read"

        Returns:
            True if the user has the permission, False otherwise
        """
        granted = await self.get_user_permissions(user_id)
        return granted is not None and permission in granted

    async def has_any_permission(
        self, user_id: UUID, permissions: Iterable[str]
    ) -> bool:
        """Check if a user has any of the specified permissions."""
        granted = await self.get_user_permissions(user_id)
        return granted is not None and not granted.isdisjoint(permissions)

    async def has_all_permissions(
        self, user_id: UUID, permissions: Iterable[str]
    ) -> bool:
        """Check if a user has all of the specified permissions.

        An empty set of permissions is held by every existing user.
        """
        granted = await self.get_user_permissions(user_id)
        return granted is not None and granted.issuperset(permissions)
