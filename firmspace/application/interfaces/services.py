"""Service interfaces (ports) for the application layer.

Protocols define contracts for the identity provider and audit sinks (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from firmspace.application.dtos.audit import AuditRecord
    from firmspace.application.dtos.user import IdentityRecord


class IIdentityProvider(Protocol):
    """Identity provider: issues and verifies caller identities."""

    async def verify_id_token(self, token: str) -> str:
        """Return the verified uid for an ID token. Raises ValueError if invalid."""

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        photo_url: str,
    ) -> IdentityRecord:
        """Create an identity account and return it."""

    async def update_user(
        self,
        uid: str,
        *,
        email: str | None = None,
        password: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> None:
        """Update the given account fields (None fields are left unchanged)."""

    async def delete_user(self, uid: str) -> None:
        """Delete an identity account."""

    async def get_user_by_email(self, email: str) -> IdentityRecord | None:
        """Return the account registered with email, or None."""


class IAuditSink(Protocol):
    """Destination for audit records (log stream, audit collection, ...)."""

    async def write(self, record: AuditRecord) -> None:
        """Persist one audit record. May raise; callers swallow and log."""
