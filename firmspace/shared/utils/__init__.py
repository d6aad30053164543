"""Shared helpers: UTC time and id generation."""

from firmspace.shared.utils.datetime import ensure_utc, utc_now
from firmspace.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
