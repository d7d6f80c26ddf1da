"""User database models."""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rbac_api.core.constants import MAX_EMAIL_LENGTH
from rbac_api.core.database.base import Base, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from rbac_api.core.permissions.models import Role


class User(Base, UUIDMixin, TimestampMixin):
    """User model representing a set of password credentials.

    Attributes:
        email: Globally unique email address, stored and matched exactly
        password_hash: Bcrypt hash of the password
        roles: Roles held by the user; their permissions are the user's
            effective permissions
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Relationships
    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary="user_roles",
        back_populates="users",
        lazy="selectin",
    )

    @property
    def role_names(self) -> list[str]:
        """Names of the roles held by the user, sorted."""
        return sorted(role.name for role in self.roles)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
