"""Audit sink that writes one JSON line per record to the audit logger."""

import json
import logging

from firmspace.application.dtos.audit import AuditRecord
from firmspace.shared.telemetry.logging import AUDIT_LOGGER_NAME


class LoggingAuditSink:
    """Structured log sink; the log pipeline is the audit store."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    async def write(self, record: AuditRecord) -> None:
        self._logger.info(json.dumps(record.to_dict(), default=str, sort_keys=True))
