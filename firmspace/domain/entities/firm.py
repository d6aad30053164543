"""Firm domain entity (top-level tenant)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FirmEntity:
    """Snapshot of a firm document."""

    id: str
    name: str
    photo_url: str
    created_by: str
    created_at: datetime | None = None
    version: str | None = None
