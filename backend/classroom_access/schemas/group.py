from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    logo_url: str | None = None
    slack_link: str | None = None
    repo_link: str | None = None


class GroupResponse(BaseModel):
    id: int
    name: str
    logo_url: str | None = None
    slack_link: str | None = None
    repo_link: str | None = None
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupAssignmentRequest(BaseModel):
    group_id: int | None
