"""Tests for Settings validation."""

import json

import pytest
from pydantic import ValidationError

from firmspace.core.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FIREBASE_PROJECT_ID",
        "FIRESTORE_EMULATOR_HOST",
        "FIREBASE_AUTH_EMULATOR_HOST",
        "FIREBASE_SERVICE_ACCOUNT_KEY",
        "FIREBASE_SERVICE_ACCOUNT_PATH",
        "AUDIT_SINK",
    ):
        monkeypatch.delenv(name, raising=False)


def test_emulators_need_project_id() -> None:
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            firestore_emulator_host="localhost:8080",
            firebase_auth_emulator_host="localhost:9099",
        )


def test_emulators_with_project_id() -> None:
    settings = Settings(
        _env_file=None,
        firestore_emulator_host="localhost:8080",
        firebase_auth_emulator_host="localhost:9099",
        firebase_project_id="demo",
    )
    assert settings.uses_emulators
    assert settings.load_service_account() is None


def test_credentials_required_without_emulators() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_service_account_key_is_parsed() -> None:
    key = {"type": "service_account", "project_id": "prod-project"}
    settings = Settings(_env_file=None, firebase_service_account_key=json.dumps(key))
    assert settings.load_service_account() == key


def test_service_account_path_must_exist(tmp_path) -> None:
    settings = Settings(
        _env_file=None, firebase_service_account_path=str(tmp_path / "missing.json")
    )
    with pytest.raises(ValueError):
        settings.load_service_account()


def test_unknown_audit_sink_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            firestore_emulator_host="localhost:8080",
            firebase_auth_emulator_host="localhost:9099",
            firebase_project_id="demo",
            audit_sink="kafka",
        )
