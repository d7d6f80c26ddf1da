"""Pydantic schemas for roles and permissions."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PermissionResponse(BaseModel):
    """Public view of a permission."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None


class RoleResponse(BaseModel):
    """Public view of a role with the permissions it grants."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    permissions: list[PermissionResponse] = []
