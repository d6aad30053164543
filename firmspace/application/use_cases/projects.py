"""Project operations: create inside a workspace, update."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from firmspace.application.dtos.writes import DocumentWrite
from firmspace.application.services.invariant_validator import (
    check_authenticated,
    check_create_project,
    check_document_ids,
    check_update_project,
    require_params,
)
from firmspace.application.use_cases.base import MutationService
from firmspace.domain.entities import ProjectEntity, UserEntity, WorkspaceEntity
from firmspace.domain.enums import EntityKind, Operation
from firmspace.shared.utils.datetime import ensure_utc, utc_now


class ProjectService(MutationService):
    """Create and update projects.

    A project's firmID is copied from its workspace at creation so that
    later authorization checks need only the project document.
    """

    async def create_project(
        self,
        caller_id: str | None,
        workspace_id: str | None,
        name: str | None,
        manager: str | None,
        start_date: datetime | None,
        description: str | None = None,
    ) -> str:
        """Create the project and return its store-assigned id."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(
            workspaceID=workspace_id, name=name, manager=manager, startDate=start_date
        ).raise_for_denial()
        check_document_ids(workspaceID=workspace_id).raise_for_denial()

        async with self.upstream(Operation.CREATE_PROJECT):
            caller, workspace = await self.repo.get_many(
                [(EntityKind.USER, caller_id), (EntityKind.WORKSPACE, workspace_id)]
            )
            workspace = cast(WorkspaceEntity | None, workspace)
            check_create_project(
                caller_id, cast(UserEntity | None, caller), workspace_id, workspace
            ).raise_for_denial()
            project_id = self.repo.new_id(EntityKind.PROJECT)
            await self.repo.apply(
                DocumentWrite.create(
                    EntityKind.PROJECT,
                    project_id,
                    {
                        "name": name,
                        "description": description or "",
                        "manager": manager,
                        "startDate": ensure_utc(start_date),
                        "firmID": workspace.firm_id,
                        "workspaceID": workspace_id,
                        "createdBy": caller_id,
                        "createdAt": utc_now(),
                    },
                )
            )

        self.record(
            Operation.CREATE_PROJECT,
            caller_id,
            id=project_id,
            workspaceID=workspace_id,
            firmID=workspace.firm_id,
            name=name,
            manager=manager,
            startDate=start_date,
        )
        return project_id

    async def update_project(
        self,
        caller_id: str | None,
        project_id: str | None,
        name: str | None,
        manager: str | None,
        start_date: datetime | None,
        description: str | None = None,
    ) -> None:
        check_authenticated(caller_id).raise_for_denial()
        require_params(
            id=project_id, name=name, manager=manager, startDate=start_date
        ).raise_for_denial()
        check_document_ids(id=project_id).raise_for_denial()

        async with self.upstream(Operation.UPDATE_PROJECT):
            caller, project = await self.repo.get_many(
                [(EntityKind.USER, caller_id), (EntityKind.PROJECT, project_id)]
            )
            check_update_project(
                caller_id,
                cast(UserEntity | None, caller),
                project_id,
                cast(ProjectEntity | None, project),
            ).raise_for_denial()
            # workspaceID and firmID are fixed at creation
            await self.repo.apply(
                DocumentWrite.update(
                    EntityKind.PROJECT,
                    project_id,
                    {
                        "name": name,
                        "description": description or "",
                        "manager": manager,
                        "startDate": ensure_utc(start_date),
                    },
                )
            )

        self.record(
            Operation.UPDATE_PROJECT,
            caller_id,
            id=project_id,
            name=name,
            manager=manager,
            startDate=start_date,
        )
