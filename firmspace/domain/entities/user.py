"""User domain entity.

A user belongs to at most one firm. The firm binding (firm_id, firm_role)
is set and cleared together.
"""

from dataclasses import dataclass
from datetime import datetime

from firmspace.domain.enums import FirmRole


@dataclass(frozen=True)
class UserEntity:
    """Snapshot of a user document.

    version is the store's update time at fetch; it is used as a write
    precondition and never persisted as a field.
    """

    id: str
    email: str
    display_name: str
    photo_url: str
    firm_id: str | None = None
    firm_role: FirmRole | None = None
    created_at: datetime | None = None
    version: str | None = None

    @property
    def is_attached(self) -> bool:
        """Return whether the user currently belongs to a firm."""
        return bool(self.firm_id)

    def is_member_of(self, firm_id: str) -> bool:
        """Return whether the user belongs to the given firm."""
        return bool(self.firm_id) and self.firm_id == firm_id
