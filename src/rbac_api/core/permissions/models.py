"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: a named action on a resource, e.g. ``user:read``
- Role: a named set of permissions
- user_roles / role_permissions: plain association tables
"""

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_api.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_NAME_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from rbac_api.core.database.base import Base, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from rbac_api.modules.users.models import User


# Junction table for Role <-> Permission many-to-many relationship
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column(
        "role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "permission_id",
        Uuid,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Junction table for User <-> Role many-to-many relationship
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    ),
    Column(
        "role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Permission(Base, UUIDMixin, TimestampMixin):
    """Permission model representing an action on a resource.

    Attributes:
        name: Globally unique name in ``resource:action`` form
        description: Human-readable description of the permission

    Examples:
        - user:read -> Can view users
        - role:write -> Can create roles and assign them to users
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    # Relationships
    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary=role_permissions,
        back_populates="permissions",
    )

    def __repr__(self) -> str:
        return f"<Permission({self.name})>"


class Role(Base, UUIDMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Globally unique role name (e.g., "admin", "user")
        description: Human-readable description of the role
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    # Relationships
    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        lazy="selectin",
    )
    users: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_roles,
        back_populates="roles",
    )

    @property
    def permission_names(self) -> set[str]:
        """Names of every permission granted by this role."""
        return {permission.name for permission in self.permissions}

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"
