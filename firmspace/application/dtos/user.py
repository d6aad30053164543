"""DTOs for user use cases."""

from dataclasses import dataclass
from datetime import datetime

from firmspace.domain.enums import FirmRole


@dataclass(frozen=True)
class IdentityRecord:
    """Account held by the identity provider (never includes the password)."""

    uid: str
    email: str | None
    display_name: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    disabled: bool = False


@dataclass(frozen=True)
class UserProfile:
    """User read-model returned by create-user."""

    id: str
    email: str
    display_name: str
    photo_url: str
    firm_id: str | None
    firm_role: FirmRole | None
    created_at: datetime
