"""Workspace operations: create and update inside the caller's firm."""

from __future__ import annotations

from typing import cast

from firmspace.application.dtos.writes import DocumentWrite
from firmspace.application.services.invariant_validator import (
    check_authenticated,
    check_create_workspace,
    check_document_ids,
    check_update_workspace,
    require_params,
)
from firmspace.application.use_cases.base import MutationService
from firmspace.domain.entities import UserEntity, WorkspaceEntity
from firmspace.domain.enums import EntityKind, Operation
from firmspace.shared.utils.datetime import utc_now


class WorkspaceService(MutationService):
    """Create and update workspaces; firmID always comes from the caller."""

    async def create_workspace(
        self,
        caller_id: str | None,
        workspace_id: str | None,
        name: str | None,
        photo_url: str | None,
        description: str | None = None,
    ) -> None:
        check_authenticated(caller_id).raise_for_denial()
        require_params(id=workspace_id, name=name, photoURL=photo_url).raise_for_denial()
        check_document_ids(id=workspace_id).raise_for_denial()

        async with self.upstream(Operation.CREATE_WORKSPACE):
            caller = cast(
                UserEntity | None, await self.repo.get(EntityKind.USER, caller_id)
            )
            check_create_workspace(caller_id, caller).raise_for_denial()
            await self.repo.apply(
                DocumentWrite.create(
                    EntityKind.WORKSPACE,
                    workspace_id,
                    {
                        "name": name,
                        "description": description or "",
                        "photoURL": photo_url,
                        "firmID": caller.firm_id,
                        "createdBy": caller_id,
                        "createdAt": utc_now(),
                    },
                )
            )

        self.record(
            Operation.CREATE_WORKSPACE,
            caller_id,
            id=workspace_id,
            name=name,
            photoURL=photo_url,
            firmID=caller.firm_id,
        )

    async def update_workspace(
        self,
        caller_id: str | None,
        workspace_id: str | None,
        name: str | None,
        photo_url: str | None,
        description: str | None = None,
    ) -> None:
        """Update name, photo and (when given) description. firmID is never touched."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(id=workspace_id, name=name, photoURL=photo_url).raise_for_denial()
        check_document_ids(id=workspace_id).raise_for_denial()

        async with self.upstream(Operation.UPDATE_WORKSPACE):
            caller, workspace = await self.repo.get_many(
                [(EntityKind.USER, caller_id), (EntityKind.WORKSPACE, workspace_id)]
            )
            check_update_workspace(
                caller_id,
                cast(UserEntity | None, caller),
                workspace_id,
                cast(WorkspaceEntity | None, workspace),
            ).raise_for_denial()
            fields = {"name": name, "photoURL": photo_url}
            if description is not None:
                fields["description"] = description
            await self.repo.apply(
                DocumentWrite.update(EntityKind.WORKSPACE, workspace_id, fields)
            )

        self.record(Operation.UPDATE_WORKSPACE, caller_id, id=workspace_id, **fields)
