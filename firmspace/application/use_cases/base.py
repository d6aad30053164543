"""Shared pipeline pieces for the mutation services."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from firmspace.application.dtos.audit import AuditRecord
from firmspace.application.interfaces.repositories import IEntityRepository
from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.domain.enums import Operation
from firmspace.domain.exceptions import FirmspaceException, UnknownException
from firmspace.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class MutationService:
    """Base for services that fetch, validate, write, then audit.

    Every step that talks to the store or identity provider runs inside
    upstream(); validation denials and conflicts pass through unchanged,
    anything else is logged and replaced by an opaque UnknownException.
    """

    def __init__(self, repo: IEntityRepository, audit: AuditEmitter) -> None:
        self.repo = repo
        self.audit = audit

    @asynccontextmanager
    async def upstream(self, operation: Operation) -> AsyncIterator[None]:
        try:
            yield
        except FirmspaceException:
            raise
        except Exception as exc:
            logger.exception(
                "%s failed (code=%s)", operation.value, getattr(exc, "code", None)
            )
            raise UnknownException() from exc

    def record(self, operation: Operation, actor_id: str | None, **keys: Any) -> None:
        """Emit the audit record for a committed mutation."""
        self.audit.emit(AuditRecord(operation, actor_id, utc_now(), keys))
