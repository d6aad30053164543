"""UTC timestamps for stored documents and audit records."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time, timezone-aware UTC. Used for createdAt and audit `at`."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a client-supplied timestamp (e.g. a project startDate) to UTC.

    Naive values are taken to be UTC already; aware values are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
