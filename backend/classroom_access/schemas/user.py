from pydantic import BaseModel, ConfigDict, Field

from .role import RoleGrantResponse


class UserProvisionRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(..., min_length=1, max_length=255)


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    group_id: int | None = None
    group_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserContextResponse(BaseModel):
    user: UserResponse
    roles: list[RoleGrantResponse]
    effective_role_name: str
    permissions: list[str]
