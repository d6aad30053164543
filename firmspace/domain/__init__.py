"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from firmspace.domain.entities import (
    Entity,
    FirmEntity,
    ProjectEntity,
    UserEntity,
    WorkspaceEntity,
)
from firmspace.domain.enums import EntityKind, FirmRole, Operation
from firmspace.domain.exceptions import (
    ConflictException,
    FirmspaceException,
    ForbiddenException,
    InvalidInputException,
    ResourceNotFoundException,
    UnauthenticatedException,
    UnknownException,
)

__all__ = [
    # Entities
    "Entity",
    "FirmEntity",
    "ProjectEntity",
    "UserEntity",
    "WorkspaceEntity",
    # Enums
    "EntityKind",
    "FirmRole",
    "Operation",
    # Exceptions
    "ConflictException",
    "FirmspaceException",
    "ForbiddenException",
    "InvalidInputException",
    "ResourceNotFoundException",
    "UnauthenticatedException",
    "UnknownException",
]
