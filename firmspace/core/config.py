"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Store and identity-provider connection details are
validated at load time.
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AUDIT_SINKS = ("log", "firestore")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Either a service account (key or path) or the Firebase emulators must be
    configured; see validate_connections.
    """

    # App
    app_name: str = "firmspace"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firebase: service account via key (env, e.g. on Vercel) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Overrides the service account's project_id; required with emulators.
    firebase_project_id: str | None = None

    # Emulators (same variable names the Firebase tooling uses). When set,
    # requests go to the emulator and no credentials are needed.
    firestore_emulator_host: str | None = None
    firebase_auth_emulator_host: str | None = None

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Audit trail: "log" (structured log lines) or "firestore" (audit collection)
    audit_sink: str = "log"
    audit_collection: str = "audit_log"

    # Collapse invalid-input/forbidden/not-found/conflict into "missing-params"
    # for clients that still expect the single legacy code.
    legacy_error_codes: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def uses_emulators(self) -> bool:
        """True when both Firestore and Auth point to local emulators."""
        return bool(self.firestore_emulator_host and self.firebase_auth_emulator_host)

    def load_service_account(self) -> dict | None:
        """Return service account dict from env key or file path (None if neither is set)."""
        key_json = (
            self.firebase_service_account_key.get_secret_value()
            if self.firebase_service_account_key
            else None
        )
        if key_json:
            try:
                return json.loads(key_json)
            except json.JSONDecodeError as e:
                raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
        if self.firebase_service_account_path:
            path = Path(self.firebase_service_account_path).expanduser().resolve()
            if not path.is_file():
                raise ValueError(
                    f"FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: {path}"
                )
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        return None

    @model_validator(mode="after")
    def validate_connections(self) -> "Settings":
        """Validate store/identity connection settings and audit sink.

        - Emulators: FIREBASE_PROJECT_ID required, credentials optional.
        - Otherwise: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        """
        if self.uses_emulators:
            if not self.firebase_project_id:
                raise ValueError(
                    "FIREBASE_PROJECT_ID is required when FIRESTORE_EMULATOR_HOST "
                    "and FIREBASE_AUTH_EMULATOR_HOST are set."
                )
        else:
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "Set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) or "
                    "FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file), or point "
                    "FIRESTORE_EMULATOR_HOST and FIREBASE_AUTH_EMULATOR_HOST at the emulators."
                )
        if self.audit_sink not in AUDIT_SINKS:
            raise ValueError(
                f"audit_sink must be one of {AUDIT_SINKS}, got: {self.audit_sink!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
