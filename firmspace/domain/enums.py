"""Domain enumerations for firmspace.

Enums represent fixed sets of domain values (entity kinds, firm roles,
operations recorded in the audit trail).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class EntityKind(_ValuesMixin, str, Enum):
    """Kinds of entities held in the document store."""

    USER = "user"
    FIRM = "firm"
    WORKSPACE = "workspace"
    PROJECT = "project"


class FirmRole(_ValuesMixin, str, Enum):
    """Role of a user inside their firm. Non-null exactly when the user has a firm."""

    ADMIN = "ADMIN"


class Operation(_ValuesMixin, str, Enum):
    """Remote-callable operations; values are the names used in audit records."""

    CREATE_USER = "create-user"
    UPDATE_USER = "update-user"
    SEARCH_USER_BY_EMAIL = "search-user-by-email"
    CREATE_FIRM = "create-firm"
    UPDATE_FIRM = "update-firm"
    ADD_TO_FIRM = "add-to-firm"
    REMOVE_FROM_FIRM = "remove-from-firm"
    CREATE_WORKSPACE = "create-workspace"
    UPDATE_WORKSPACE = "update-workspace"
    CREATE_PROJECT = "create-project"
    UPDATE_PROJECT = "update-project"
