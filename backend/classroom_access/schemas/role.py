from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


def _permission_names(value: Any) -> list[str]:
    if value is None:
        return []
    return sorted(getattr(item, "name", item) for item in value)


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    privilege_level: int = Field(..., ge=0)
    description: str | None = None


class RolePermissionsUpdate(BaseModel):
    permissions: list[str]


class RoleGrantResponse(BaseModel):
    id: int | None = None
    name: str
    privilege_level: int
    permissions: list[str]

    model_config = ConfigDict(from_attributes=True)

    @field_validator("permissions", mode="before")
    @classmethod
    def _names(cls, value: Any) -> list[str]:
        return _permission_names(value)


class RoleResponse(RoleGrantResponse):
    id: int
    description: str | None = None
    is_default: bool
    created_at: datetime
    updated_at: datetime


class RoleAssignmentRequest(BaseModel):
    role_ids: list[StrictInt]


class RoleAssignmentResponse(BaseModel):
    message: str
    user_id: int
    roles: list[RoleGrantResponse]
