"""Application services: invariant checks and the audit emitter."""

from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.application.services.invariant_validator import Decision, DenialReason

__all__ = ["AuditEmitter", "Decision", "DenialReason"]
