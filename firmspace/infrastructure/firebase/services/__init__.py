"""Firestore-backed service implementations."""

from firmspace.infrastructure.firebase.services.audit_sink_firestore import (
    FirestoreAuditSink,
)

__all__ = ["FirestoreAuditSink"]
