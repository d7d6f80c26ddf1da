"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from rbac_api.core.database import bounded
from rbac_api.core.errors import NotFoundError
from rbac_api.modules.roles.repos import RoleRepo
from rbac_api.modules.users.models import User
from rbac_api.modules.users.repos import UserRepo


logger = structlog.get_logger()


class UserService:
    """Service for user queries and role assignment.

    Role assignment is the only way a user changes after registration.
    """

    def __init__(self, repo: UserRepo, roles: RoleRepo) -> None:
        self.repo = repo
        self.roles = roles

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user doesn't exist
        """
        async with bounded(self.repo.session):
            user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def list_users(self, page: int, page_size: int) -> tuple[list[User], int]:
        """List users with pagination."""
        async with bounded(self.repo.session):
            return await self.repo.list(page=page, page_size=page_size)

    async def assign_role(self, user_id: UUID, role_id: UUID) -> User:
        """Grant a role to a user. Granting a held role changes nothing.

        Args:
            user_id: The user's UUID
            role_id: The role's UUID

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user or the role doesn't exist
        """
        user = await self.get_user(user_id)
        async with bounded(self.repo.session):
            role = await self.roles.get_by_id(role_id)
        if not role:
            raise NotFoundError(
                "Role not found",
                resource="role",
                resource_id=str(role_id),
            )

        async with bounded(self.repo.session):
            user = await self.repo.add_role(user, role)
            await self.repo.session.commit()
        logger.info("role_assigned", user_id=str(user_id), role=role.name)
        return user

    async def remove_role(self, user_id: UUID, role_id: UUID) -> None:
        """Revoke a role from a user.

        Raises:
            NotFoundError: If the user doesn't exist or doesn't hold the role
        """
        user = await self.get_user(user_id)
        async with bounded(self.repo.session):
            role = await self.roles.get_by_id(role_id)
            removed = role is not None and await self.repo.remove_role(user, role)
            if removed:
                await self.repo.session.commit()
        if not removed:
            raise NotFoundError(
                "Role not assigned to user",
                resource="role",
                resource_id=str(role_id),
            )

        logger.info("role_removed", user_id=str(user_id), role=role.name)


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
