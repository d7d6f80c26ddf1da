"""Bootstrap data for the permission graph.

Creates the permission catalogue, the default roles and the initial admin
grant. Every step checks before it writes, so running it again changes
nothing. Roles that already exist are never modified, so a grant an
administrator revoked stays revoked. The rows it creates are ordinary
data: the decision engine treats them like any other role or permission.
"""

from dataclasses import dataclass, field

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_api.core.constants import DEFAULT_BOOTSTRAP_ADMIN_EMAIL
from rbac_api.core.permissions.models import Permission, Role
from rbac_api.modules.roles.repos import PermissionRepository, RoleRepository
from rbac_api.modules.users.repos import UserRepository


logger = structlog.get_logger()

ADMIN_ROLE = "admin"
USER_ROLE = "user"

PERMISSION_CATALOGUE: dict[str, str] = {
    "user:read": "View users",
    "user:write": "Modify users",
    "role:read": "View roles and permissions",
    "role:write": "Create roles and assign them to users",
}

ROLE_DEFINITIONS: dict[str, tuple[str, frozenset[str]]] = {
    ADMIN_ROLE: ("Full access", frozenset(PERMISSION_CATALOGUE)),
    USER_ROLE: ("Standard user", frozenset({"user:read", "user:write"})),
}


@dataclass
class SeedSummary:
    """What a seeding run changed."""

    permissions_created: list[str] = field(default_factory=list)
    roles_created: list[str] = field(default_factory=list)
    admin_granted: str | None = None

    @property
    def changed(self) -> bool:
        return bool(
            self.permissions_created
            or self.roles_created
            or self.admin_granted
        )


async def seed_permissions(
    session: AsyncSession, summary: SeedSummary
) -> dict[str, Permission]:
    """Create any missing catalogue permissions."""
    repo = PermissionRepository(session)
    permissions: dict[str, Permission] = {}

    for name, description in PERMISSION_CATALOGUE.items():
        permission = await repo.get_by_name(name)
        if permission is None:
            permission = await repo.create(name, description)
            summary.permissions_created.append(name)
        permissions[name] = permission

    return permissions


async def seed_roles(
    session: AsyncSession,
    permissions: dict[str, Permission],
    summary: SeedSummary,
) -> dict[str, Role]:
    """Create any missing default roles with their default grants.

    An existing role is returned as it is, whatever permissions it holds.
    """
    repo = RoleRepository(session)
    roles: dict[str, Role] = {}

    for name, (description, granted) in ROLE_DEFINITIONS.items():
        role = await repo.get_by_name(name)
        if role is None:
            role = await repo.create(
                name,
                description,
                permissions=[permissions[p] for p in sorted(granted)],
            )
            summary.roles_created.append(name)
        roles[name] = role

    await session.flush()
    return roles


async def grant_bootstrap_admin(
    session: AsyncSession,
    admin_role: Role,
    email: str,
    summary: SeedSummary,
) -> None:
    """Give the admin role to the bootstrap account if it exists."""
    repo = UserRepository(session)
    user = await repo.get_by_email(email)
    if user is None:
        logger.info("bootstrap_admin_missing", email=email)
        return

    if admin_role not in user.roles:
        await repo.add_role(user, admin_role)
        summary.admin_granted = email


async def seed_rbac(
    session: AsyncSession,
    bootstrap_admin_email: str = DEFAULT_BOOTSTRAP_ADMIN_EMAIL,
) -> SeedSummary:
    """Seed the permission graph and commit.

    Args:
        session: Session to write through
        bootstrap_admin_email: Account that should hold the admin role

    Returns:
        Summary of what was created
    """
    summary = SeedSummary()

    permissions = await seed_permissions(session, summary)
    roles = await seed_roles(session, permissions, summary)
    await grant_bootstrap_admin(session, roles[ADMIN_ROLE], bootstrap_admin_email, summary)

    await session.commit()
    logger.info(
        "rbac_seeded",
        permissions_created=summary.permissions_created,
        roles_created=summary.roles_created,
        admin_granted=summary.admin_granted,
    )
    return summary
