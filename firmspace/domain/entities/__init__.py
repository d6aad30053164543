"""Domain entities.

Pure snapshots of store documents; no persistence concerns.
"""

from firmspace.domain.entities.firm import FirmEntity
from firmspace.domain.entities.project import ProjectEntity
from firmspace.domain.entities.user import UserEntity
from firmspace.domain.entities.workspace import WorkspaceEntity

Entity = UserEntity | FirmEntity | WorkspaceEntity | ProjectEntity

__all__ = [
    "Entity",
    "FirmEntity",
    "ProjectEntity",
    "UserEntity",
    "WorkspaceEntity",
]
