"""Pydantic schemas for user and credential operations."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from rbac_api.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH


# ============================================================
# Credential Schemas
# ============================================================


class Credentials(BaseModel):
    """Email and password pair, both present and non-empty."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(Credentials):
    """Request body for login.

    The email is not checked for syntax here: a malformed address fails
    login the same way an unknown one does.
    """


class RegisterRequest(Credentials):
    """Request body for user registration."""

    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class TokenResponse(BaseModel):
    """Response body for a successful login.

    Attributes:
        access_token: Signed JWT for API access
        token_type: Always "bearer"
        expires_in: Token lifetime in seconds
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int


# ============================================================
# User Schemas
# ============================================================


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    created_at: datetime
    updated_at: datetime


class UserDetailResponse(UserResponse):
    """User view including role names."""

    roles: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("role_names", "roles"),
    )


class UserListResponse(BaseModel):
    """Paginated list of users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int


class AssignRoleRequest(BaseModel):
    """Request body for granting a role to a user."""

    role_id: UUID
