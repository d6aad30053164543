"""Project domain entity.

firm_id is copied from the parent workspace when the project is created.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProjectEntity:
    """Snapshot of a project document."""

    id: str
    name: str
    manager: str
    start_date: datetime | None
    firm_id: str
    workspace_id: str
    created_by: str
    description: str = ""
    created_at: datetime | None = None
    version: str | None = None
