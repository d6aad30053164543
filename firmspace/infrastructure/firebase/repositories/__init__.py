"""Firestore-backed repository implementations."""

from firmspace.infrastructure.firebase.repositories.entity_repo_firestore import (
    FirestoreEntityRepository,
    to_entity,
)

__all__ = ["FirestoreEntityRepository", "to_entity"]
