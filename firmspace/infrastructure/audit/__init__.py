"""Audit sinks that do not depend on the document store."""

from firmspace.infrastructure.audit.log_sink import LoggingAuditSink

__all__ = ["LoggingAuditSink"]
