"""Write descriptors handed to the entity repository."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from firmspace.domain.enums import EntityKind

EntityRef = tuple[EntityKind, str]


class WriteOp(str, Enum):
    """Document write operation."""

    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class DocumentWrite:
    """One document write.

    CREATE fails if the document already exists. UPDATE merges `fields` into
    an existing document; with expected_version it additionally requires the
    document to be unchanged since it was fetched.
    """

    kind: EntityKind
    entity_id: str
    op: WriteOp
    fields: dict[str, Any]
    expected_version: str | None = None

    @classmethod
    def create(cls, kind: EntityKind, entity_id: str, fields: dict[str, Any]) -> "DocumentWrite":
        return cls(kind, entity_id, WriteOp.CREATE, fields)

    @classmethod
    def update(
        cls,
        kind: EntityKind,
        entity_id: str,
        fields: dict[str, Any],
        expected_version: str | None = None,
    ) -> "DocumentWrite":
        return cls(kind, entity_id, WriteOp.UPDATE, fields, expected_version)
