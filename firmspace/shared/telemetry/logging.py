"""Logging configuration for the service and its audit channel."""

import logging
import sys

from firmspace.core.config import get_settings

AUDIT_LOGGER_NAME = "firmspace.audit"

# Request lines from these include Identity Toolkit / Firestore URLs.
_CHATTY_LOGGERS = ("httpx", "httpcore", "google.auth")


def setup_logging() -> None:
    """Configure stdout logging.

    Root level is DEBUG when settings.debug is True, otherwise INFO. HTTP
    client loggers stay at WARNING and the audit logger always emits INFO,
    so the "log" audit sink works whatever the root level.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger(AUDIT_LOGGER_NAME).setLevel(logging.INFO)
