"""Firestore-backed audit sink (implements IAuditSink)."""

from __future__ import annotations

from firmspace.application.dtos.audit import AuditRecord
from firmspace.infrastructure.firebase._rest_client import FirestoreRESTClient
from firmspace.shared.utils.generators import generate_cuid


class FirestoreAuditSink:
    """Writes one document per audit record into the audit collection."""

    def __init__(self, client: FirestoreRESTClient, collection: str = "audit_log") -> None:
        self._coll = client.collection(collection)

    async def write(self, record: AuditRecord) -> None:
        await self._coll.create(
            generate_cuid(),
            {
                **record.keys,
                "action": record.action.value,
                "by": record.actor_id,
                "at": record.at,
            },
        )
