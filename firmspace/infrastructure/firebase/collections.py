"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".
"""

from firmspace.domain.enums import EntityKind

COLLECTION_USERS = "users"
COLLECTION_FIRMS = "firms"
COLLECTION_WORKSPACES = "workspaces"
COLLECTION_PROJECTS = "projects"

COLLECTION_BY_KIND: dict[EntityKind, str] = {
    EntityKind.USER: COLLECTION_USERS,
    EntityKind.FIRM: COLLECTION_FIRMS,
    EntityKind.WORKSPACE: COLLECTION_WORKSPACES,
    EntityKind.PROJECT: COLLECTION_PROJECTS,
}
