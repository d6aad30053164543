"""Workspace API: create and update inside the caller's firm."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from firmspace.api.v1.dependencies import CallerId, get_workspace_service
from firmspace.application.use_cases import WorkspaceService
from firmspace.core.limiter import limit_writes
from firmspace.schemas.workspace import (
    WorkspaceCreateRequest,
    WorkspaceCreateResponse,
    WorkspaceUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=WorkspaceCreateResponse, status_code=status.HTTP_201_CREATED)
@limit_writes
async def create_workspace(
    request: Request,
    body: WorkspaceCreateRequest,
    caller_id: CallerId,
    service: Annotated[WorkspaceService, Depends(get_workspace_service)],
):
    await service.create_workspace(
        caller_id, body.id, body.name, body.photo_url, body.description
    )
    return WorkspaceCreateResponse(id=body.id)


@router.put("/{workspace_id}", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def update_workspace(
    request: Request,
    workspace_id: str,
    body: WorkspaceUpdateRequest,
    caller_id: CallerId,
    service: Annotated[WorkspaceService, Depends(get_workspace_service)],
) -> None:
    await service.update_workspace(
        caller_id, workspace_id, body.name, body.photo_url, body.description
    )
