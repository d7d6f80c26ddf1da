"""User API routes.

Permission requirements for these operations live in the operation
permission table and are enforced before the handlers run.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from rbac_api.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from rbac_api.modules.users.schemas import (
    AssignRoleRequest,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
)
from rbac_api.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
)
async def list_users(
    service: UserSvc,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> UserListResponse:
    """List users, oldest first."""
    users, total = await service.list_users(page, page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    summary="Get user",
)
async def get_user(user_id: UUID, service: UserSvc) -> UserDetailResponse:
    """Get a user with their role names."""
    user = await service.get_user(user_id)
    return UserDetailResponse.model_validate(user)


@router.post(
    "/{user_id}/roles",
    response_model=UserDetailResponse,
    summary="Assign role to user",
)
async def assign_role(
    user_id: UUID,
    data: AssignRoleRequest,
    service: UserSvc,
) -> UserDetailResponse:
    """Grant a role to a user."""
    user = await service.assign_role(user_id, data.role_id)
    return UserDetailResponse.model_validate(user)


@router.delete(
    "/{user_id}/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove role from user",
)
async def remove_role(user_id: UUID, role_id: UUID, service: UserSvc) -> Response:
    """Revoke a role from a user."""
    await service.remove_role(user_id, role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
