"""Project API: create inside a workspace, update."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from firmspace.api.v1.dependencies import CallerId, get_project_service
from firmspace.application.use_cases import ProjectService
from firmspace.core.limiter import limit_writes
from firmspace.schemas.project import (
    ProjectCreateRequest,
    ProjectCreateResponse,
    ProjectUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=ProjectCreateResponse, status_code=status.HTTP_201_CREATED)
@limit_writes
async def create_project(
    request: Request,
    body: ProjectCreateRequest,
    caller_id: CallerId,
    service: Annotated[ProjectService, Depends(get_project_service)],
):
    """Create a project; the response carries the generated id."""
    project_id = await service.create_project(
        caller_id,
        body.workspace_id,
        body.name,
        body.manager,
        body.start_date,
        body.description,
    )
    return ProjectCreateResponse(id=project_id)


@router.put("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def update_project(
    request: Request,
    project_id: str,
    body: ProjectUpdateRequest,
    caller_id: CallerId,
    service: Annotated[ProjectService, Depends(get_project_service)],
) -> None:
    await service.update_project(
        caller_id,
        project_id,
        body.name,
        body.manager,
        body.start_date,
        body.description,
    )
