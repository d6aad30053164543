"""Pytest configuration and fixtures for firmspace.

Settings point at the Firebase emulators so that importing firmspace.main
needs no credentials. HTTP tests run the app through ASGITransport (no
lifespan) with the store, identity provider and audit emitter replaced by
in-memory fakes via dependency_overrides.
"""

import os

os.environ.setdefault("FIREBASE_PROJECT_ID", "firmspace-test")
os.environ.setdefault("FIRESTORE_EMULATOR_HOST", "localhost:8080")
os.environ.setdefault("FIREBASE_AUTH_EMULATOR_HOST", "localhost:9099")

import pytest
from httpx import ASGITransport, AsyncClient

from firmspace.api.v1.dependencies import (
    get_audit_emitter,
    get_identity_provider,
    get_repository,
)
from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.core.config import get_settings
from firmspace.core.limiter import limiter
from firmspace.main import app
from tests.fakes import (
    FakeIdentityProvider,
    InMemoryEntityRepository,
    RecordingAuditSink,
)


@pytest.fixture
def repo() -> InMemoryEntityRepository:
    return InMemoryEntityRepository()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def audit(audit_sink: RecordingAuditSink) -> AuditEmitter:
    return AuditEmitter(audit_sink)


@pytest.fixture
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Set environment variables for one test and reload settings around it."""

    def _set(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    yield _set
    get_settings.cache_clear()


@pytest.fixture
async def client(
    repo: InMemoryEntityRepository,
    identity: FakeIdentityProvider,
    audit: AuditEmitter,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app with in-memory collaborators."""
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_audit_emitter] = lambda: audit
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await audit.drain()
    limiter.enabled = True
    app.dependency_overrides.clear()

