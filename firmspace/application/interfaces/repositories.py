"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities and application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from firmspace.domain.enums import EntityKind

if TYPE_CHECKING:
    from firmspace.application.dtos.writes import DocumentWrite, EntityRef
    from firmspace.domain.entities import Entity


class IEntityRepository(Protocol):
    """Typed accessor over the document store for users, firms, workspaces, projects."""

    def new_id(self, kind: EntityKind) -> str:
        """Return a fresh document id for entities whose id is store-assigned."""

    async def get(self, kind: EntityKind, entity_id: str) -> Entity | None:
        """Return the entity snapshot, or None if the document does not exist."""

    async def get_many(self, refs: Sequence[EntityRef]) -> list[Entity | None]:
        """Fetch all refs concurrently; order-preserving, None for missing documents.

        Raises only if the store itself is unreachable.
        """

    async def apply(self, write: DocumentWrite) -> None:
        """Perform one non-batched write. Raises ConflictException on failed precondition."""

    async def commit(self, writes: Sequence[DocumentWrite]) -> None:
        """Apply all writes atomically: all become visible together or none do.

        Raises ConflictException (nothing applied) if any precondition fails.
        """
