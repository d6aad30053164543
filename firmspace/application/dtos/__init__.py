"""Application DTOs (no dependency on the store's wire format)."""

from firmspace.application.dtos.audit import AuditRecord
from firmspace.application.dtos.user import IdentityRecord, UserProfile
from firmspace.application.dtos.writes import DocumentWrite, EntityRef, WriteOp

__all__ = [
    "AuditRecord",
    "DocumentWrite",
    "EntityRef",
    "IdentityRecord",
    "UserProfile",
    "WriteOp",
]
