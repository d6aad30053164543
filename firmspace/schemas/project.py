"""Project API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreateRequest(BaseModel):
    """Request body for POST /projects. firmID is copied from the workspace."""

    model_config = ConfigDict(populate_by_name=True)

    workspace_id: str | None = Field(default=None, alias="workspaceID")
    name: str | None = None
    description: str | None = None
    manager: str | None = None
    start_date: datetime | None = Field(default=None, alias="startDate")


class ProjectUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    description: str | None = None
    manager: str | None = None
    start_date: datetime | None = Field(default=None, alias="startDate")


class ProjectCreateResponse(BaseModel):
    """Store-assigned id of the created project."""

    id: str
