"""Role and permission API routes (read-only)."""

from uuid import UUID

from fastapi import APIRouter

from rbac_api.core.database import bounded
from rbac_api.core.errors import NotFoundError
from rbac_api.modules.roles.repos import PermissionRepo, RoleRepo
from rbac_api.modules.roles.schemas import PermissionResponse, RoleResponse


router = APIRouter(tags=["roles"])


@router.get(
    "/roles",
    response_model=list[RoleResponse],
    summary="List roles",
)
async def list_roles(roles: RoleRepo) -> list[RoleResponse]:
    """List every role with the permissions it grants."""
    async with bounded(roles.session):
        found = await roles.list()
    return [RoleResponse.model_validate(role) for role in found]


@router.get(
    "/roles/{role_id}",
    response_model=RoleResponse,
    summary="Get role",
)
async def get_role(role_id: UUID, roles: RoleRepo) -> RoleResponse:
    """Get a role by ID."""
    async with bounded(roles.session):
        role = await roles.get_by_id(role_id)
    if not role:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    return RoleResponse.model_validate(role)


@router.get(
    "/permissions",
    response_model=list[PermissionResponse],
    summary="List permissions",
)
async def list_permissions(permissions: PermissionRepo) -> list[PermissionResponse]:
    """List the permission catalogue."""
    async with bounded(permissions.session):
        found = await permissions.list()
    return [PermissionResponse.model_validate(p) for p in found]
