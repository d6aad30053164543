"""Firestore client construction (REST-based, no firebase-admin).

Built once at app startup from FIREBASE_SERVICE_ACCOUNT_KEY (JSON string,
e.g. on Vercel) or FIREBASE_SERVICE_ACCOUNT_PATH (file path), or pointed at
the local emulator via FIRESTORE_EMULATOR_HOST. The instance is stored on
app.state and handed to repositories explicitly; there is no module-level
client.
"""

import logging

from firmspace.core.config import Settings
from firmspace.infrastructure.firebase._rest_client import (
    DEFAULT_BASE_URL,
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def resolve_project_id(settings: Settings, key_dict: dict | None) -> str:
    """Return FIREBASE_PROJECT_ID if set, else the service account's project_id."""
    project_id = settings.firebase_project_id or (key_dict or {}).get("project_id")
    if not project_id:
        raise ValueError(
            "Firebase project id unknown: set FIREBASE_PROJECT_ID or use a service "
            "account JSON that contains 'project_id'"
        )
    return project_id


def create_firestore_client(settings: Settings) -> FirestoreRESTClient:
    """Build the Firestore client (REST API + google-auth, or emulator).

    Raises:
        ValueError: If credentials are malformed or the project id is unknown.
    """
    if settings.firestore_emulator_host:
        project_id = resolve_project_id(settings, None)
        logger.info(
            "Using Firestore emulator at %s (project %s)",
            settings.firestore_emulator_host,
            project_id,
        )
        return FirestoreRESTClient(
            project_id,
            None,
            base_url=f"http://{settings.firestore_emulator_host}/v1",
            timeout=settings.http_timeout_seconds,
        )

    key_dict = settings.load_service_account()
    project_id = resolve_project_id(settings, key_dict)
    cred = _get_credentials(key_dict)
    return FirestoreRESTClient(
        project_id,
        cred,
        base_url=DEFAULT_BASE_URL,
        timeout=settings.http_timeout_seconds,
    )
