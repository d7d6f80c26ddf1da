"""Authentication API routes.

Provides endpoints for:
- User registration
- Login
- Reading the authenticated user
"""

from typing import Any

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

from rbac_api.core.auth.dependencies import SubjectId
from rbac_api.core.auth.service import AuthSvc
from rbac_api.core.database import bounded
from rbac_api.core.errors import IdentityNotFoundError
from rbac_api.modules.users.repos import UserRepo
from rbac_api.modules.users.schemas import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserDetailResponse,
    UserResponse,
)


router = APIRouter(prefix="/auth", tags=["auth"])


def _json_body(model: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI request body for an endpoint that parses its own body."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Creates a user account with no roles.",
    openapi_extra=_json_body(RegisterRequest),
)
async def register(request: Request, service: AuthSvc) -> UserResponse:
    """Register a new user.

    The body is parsed as JSON whatever its content type.
    """
    user = await service.register_from_payload(await request.body())
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="Authenticate with email and password to receive an access token.",
    openapi_extra=_json_body(LoginRequest),
)
async def login(request: Request, service: AuthSvc) -> TokenResponse:
    """Login with email and password."""
    return await service.login_from_payload(await request.body())


@router.get(
    "/me",
    response_model=UserDetailResponse,
    summary="Get current user",
    description="Returns the authenticated user and the names of their roles.",
)
async def read_current_user(subject_id: SubjectId, users: UserRepo) -> UserDetailResponse:
    """Get the authenticated user."""
    async with bounded(users.session):
        user = await users.get_by_id(subject_id)
    if user is None:
        raise IdentityNotFoundError()
    return UserDetailResponse.model_validate(user)
