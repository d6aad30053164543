"""Workspace domain entity.

A workspace is bound to one firm at creation; the binding never changes.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WorkspaceEntity:
    """Snapshot of a workspace document."""

    id: str
    name: str
    photo_url: str
    firm_id: str
    created_by: str
    description: str = ""
    created_at: datetime | None = None
    version: str | None = None
