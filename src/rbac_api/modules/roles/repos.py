"""Role and permission repositories for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from rbac_api.api.dependencies import DBSession
from rbac_api.core.permissions.models import Permission, Role


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: The role's UUID

        Returns:
            Role with its permissions if found, None otherwise
        """
        stmt = select(Role).where(Role.id == role_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by its unique name."""
        stmt = select(Role).where(Role.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        name: str,
        description: str | None = None,
        permissions: list[Permission] | None = None,
    ) -> Role:
        """Create a new role.

        Args:
            name: Unique role name
            description: Optional description
            permissions: Permissions the role grants

        Returns:
            The created role

        Raises:
            IntegrityError: If the name is already taken
        """
        role = Role(
            name=name,
            description=description,
            permissions=permissions or [],
        )
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def list(self) -> list[Role]:
        """List all roles ordered by name."""
        result = await self.session.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def get_by_name(self, name: str) -> Permission | None:
        """Get a permission by its unique name."""
        stmt = select(Permission).where(Permission.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self) -> list[Permission]:
        """List all permissions ordered by name."""
        result = await self.session.execute(
            select(Permission).order_by(Permission.name)
        )
        return list(result.scalars().all())

    async def create(self, name: str, description: str | None = None) -> Permission:
        """Create a new permission.

        Raises:
            IntegrityError: If the name is already taken
        """
        permission = Permission(name=name, description=description)
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission


# Type aliases for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
PermissionRepo = Annotated[PermissionRepository, Depends(PermissionRepository)]
