"""Firestore-backed entity repository (implements IEntityRepository)."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from firmspace.application.dtos.writes import DocumentWrite, EntityRef, WriteOp
from firmspace.domain.entities import (
    Entity,
    FirmEntity,
    ProjectEntity,
    UserEntity,
    WorkspaceEntity,
)
from firmspace.domain.enums import EntityKind, FirmRole
from firmspace.domain.exceptions import ConflictException
from firmspace.infrastructure.exceptions import PreconditionFailedError
from firmspace.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
    create_write,
    update_write,
)
from firmspace.infrastructure.firebase.collections import COLLECTION_BY_KIND
from firmspace.shared.utils.generators import generate_cuid


def _to_user(doc: DocumentSnapshot) -> UserEntity:
    data = doc.to_dict()
    role = data.get("firmRole")
    return UserEntity(
        id=doc.id,
        email=data.get("email", ""),
        display_name=data.get("displayName", ""),
        photo_url=data.get("photoURL", ""),
        firm_id=data.get("firmID"),
        firm_role=FirmRole(role) if role else None,
        created_at=data.get("createdAt"),
        version=doc.update_time,
    )


def _to_firm(doc: DocumentSnapshot) -> FirmEntity:
    data = doc.to_dict()
    return FirmEntity(
        id=doc.id,
        name=data.get("name", ""),
        photo_url=data.get("photoURL", ""),
        created_by=data.get("createdBy", ""),
        created_at=data.get("createdAt"),
        version=doc.update_time,
    )


def _to_workspace(doc: DocumentSnapshot) -> WorkspaceEntity:
    data = doc.to_dict()
    return WorkspaceEntity(
        id=doc.id,
        name=data.get("name", ""),
        description=data.get("description") or "",
        photo_url=data.get("photoURL", ""),
        firm_id=data.get("firmID", ""),
        created_by=data.get("createdBy", ""),
        created_at=data.get("createdAt"),
        version=doc.update_time,
    )


def _to_project(doc: DocumentSnapshot) -> ProjectEntity:
    data = doc.to_dict()
    return ProjectEntity(
        id=doc.id,
        name=data.get("name", ""),
        description=data.get("description") or "",
        manager=data.get("manager", ""),
        start_date=data.get("startDate"),
        firm_id=data.get("firmID", ""),
        workspace_id=data.get("workspaceID", ""),
        created_by=data.get("createdBy", ""),
        created_at=data.get("createdAt"),
        version=doc.update_time,
    )


_MAPPERS = {
    EntityKind.USER: _to_user,
    EntityKind.FIRM: _to_firm,
    EntityKind.WORKSPACE: _to_workspace,
    EntityKind.PROJECT: _to_project,
}


def to_entity(kind: EntityKind, doc: DocumentSnapshot) -> Entity:
    """Map a document snapshot of the given kind to its domain entity."""
    return _MAPPERS[kind](doc)


class FirestoreEntityRepository:
    """Users, firms, workspaces and projects stored as top-level Firestore collections.

    Documents keep camelCase field names. Each snapshot's version is the
    document updateTime, which update writes can require as a precondition.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    def _document(self, kind: EntityKind, entity_id: str):
        return self._client.collection(COLLECTION_BY_KIND[kind]).document(entity_id)

    def new_id(self, kind: EntityKind) -> str:
        return generate_cuid()

    async def get(self, kind: EntityKind, entity_id: str) -> Entity | None:
        doc = await self._document(kind, entity_id).get()
        if doc is None:
            return None
        return to_entity(kind, doc)

    async def get_many(self, refs: Sequence[EntityRef]) -> list[Entity | None]:
        """Fetch every ref concurrently, preserving order."""
        return list(
            await asyncio.gather(*(self.get(kind, entity_id) for kind, entity_id in refs))
        )

    async def apply(self, write: DocumentWrite) -> None:
        """Single-document write (createDocument or masked PATCH)."""
        try:
            if write.op is WriteOp.CREATE:
                coll = self._client.collection(COLLECTION_BY_KIND[write.kind])
                await coll.create(write.entity_id, write.fields)
            else:
                await self._document(write.kind, write.entity_id).update(
                    write.fields, last_update_time=write.expected_version
                )
        except PreconditionFailedError as e:
            raise ConflictException() from e

    async def commit(self, writes: Sequence[DocumentWrite]) -> None:
        """Apply all writes in one atomic documents:commit call."""
        batch = []
        for write in writes:
            name = self._document(write.kind, write.entity_id).path
            if write.op is WriteOp.CREATE:
                batch.append(create_write(name, write.fields))
            else:
                batch.append(
                    update_write(
                        name,
                        write.fields,
                        last_update_time=write.expected_version,
                    )
                )
        try:
            await self._client.commit(batch)
        except PreconditionFailedError as e:
            raise ConflictException() from e

