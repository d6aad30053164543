"""Use cases: one service per entity kind, one method per operation."""

from firmspace.application.use_cases.firms import FirmService
from firmspace.application.use_cases.projects import ProjectService
from firmspace.application.use_cases.users import UserService
from firmspace.application.use_cases.workspaces import WorkspaceService

__all__ = ["FirmService", "ProjectService", "UserService", "WorkspaceService"]
