"""User repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from rbac_api.api.dependencies import DBSession
from rbac_api.core.constants import DEFAULT_PAGE_SIZE
from rbac_api.core.permissions.models import Role
from rbac_api.modules.users.models import User


class UserRepository:
    """Repository for User database operations.

    Handles all database interactions for the User model, including the
    user's role associations. Misses return None rather than raising.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated

        Raises:
            IntegrityError: If the email is already taken
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by exact email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_with_permissions(self, user_id: UUID) -> User | None:
        """Get a user with roles and their permissions eagerly loaded.

        This is the single fetch an authorization decision needs.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.roles).selectinload(Role.permissions))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[User], int]:
        """List users with pagination.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (users list, total count)
        """
        count_stmt = select(func.count()).select_from(User)
        total = (await self.session.execute(count_stmt)).scalar_one()

        offset = (page - 1) * page_size
        stmt = (
            select(User)
            .order_by(User.created_at, User.email)
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def add_role(self, user: User, role: Role) -> User:
        """Grant a role to a user. Granting a held role is a no-op.

        Args:
            user: The user to update
            role: The role to grant

        Returns:
            The updated user
        """
        if role not in user.roles:
            user.roles.append(role)
            await self.session.flush()
        return user

    async def remove_role(self, user: User, role: Role) -> bool:
        """Revoke a role from a user.

        Args:
            user: The user to update
            role: The role to revoke

        Returns:
            True if the user held the role, False otherwise
        """
        if role not in user.roles:
            return False
        user.roles.remove(role)
        await self.session.flush()
        return True


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
