"""Audit emitter: hands audit records to a sink without gating the mutation.

emit() returns immediately; delivery runs as a background task and any
failure is logged, never raised to the service that emitted.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Any

from firmspace.application.dtos.audit import AuditRecord
from firmspace.application.interfaces.services import IAuditSink

logger = logging.getLogger(__name__)

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "id_token",
        "access_token",
        "refresh_token",
        "credentials",
    }
)


def sanitize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Redact sensitive keys and make values JSON-friendly."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in _SENSITIVE_KEYS:
            out[key] = "[REDACTED]"
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        elif isinstance(value, Enum):
            out[key] = value.value
        elif isinstance(value, dict):
            out[key] = sanitize_keys(value)
        else:
            out[key] = value
    return out


class AuditEmitter:
    """Fire-and-forget front for an IAuditSink."""

    def __init__(self, sink: IAuditSink) -> None:
        self._sink = sink
        self._pending: set[asyncio.Task] = set()

    def emit(self, record: AuditRecord) -> None:
        """Schedule delivery of one record. Must be called from a running event loop."""
        record = replace(record, keys=sanitize_keys(record.keys))
        task = asyncio.get_running_loop().create_task(self._deliver(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, record: AuditRecord) -> None:
        try:
            await self._sink.write(record)
        except Exception:
            logger.warning(
                "Failed to write audit record %s by %s",
                record.action.value,
                record.actor_id,
                exc_info=True,
            )

    async def drain(self) -> None:
        """Wait for every pending delivery (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
