"""Workspace API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceCreateRequest(BaseModel):
    """Request body for POST /workspaces. The firm is taken from the caller."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str | None = None
    description: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class WorkspaceUpdateRequest(BaseModel):
    """Request body for PUT /workspaces/{workspace_id}; omitted description is kept."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    description: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class WorkspaceCreateResponse(BaseModel):
    id: str
