"""Firestore integration over the REST API."""

from firmspace.infrastructure.firebase.client import (
    create_firestore_client,
    resolve_project_id,
)

__all__ = [
    "create_firestore_client",
    "resolve_project_id",
]
