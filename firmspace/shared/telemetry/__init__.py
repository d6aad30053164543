"""Logging setup."""

from firmspace.shared.telemetry.logging import AUDIT_LOGGER_NAME, setup_logging

__all__ = ["AUDIT_LOGGER_NAME", "setup_logging"]
