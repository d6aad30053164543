"""Tests for UserService: registration, own-account update, email lookup."""

import logging
from unittest.mock import AsyncMock

import pytest

from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.application.use_cases import UserService
from firmspace.domain.enums import EntityKind, Operation
from firmspace.domain.exceptions import (
    ConflictException,
    InvalidInputException,
    ResourceNotFoundException,
    UnauthenticatedException,
    UnknownException,
)
from firmspace.infrastructure.exceptions import FirestoreError, IdentityProviderError
from tests.fakes import FakeIdentityProvider, InMemoryEntityRepository, RecordingAuditSink


@pytest.fixture
def service(
    repo: InMemoryEntityRepository, identity: FakeIdentityProvider, audit: AuditEmitter
) -> UserService:
    return UserService(repo, identity, audit)


class TestCreateUser:
    async def test_creates_account_and_unattached_document(
        self,
        service: UserService,
        repo: InMemoryEntityRepository,
        identity: FakeIdentityProvider,
        audit: AuditEmitter,
        audit_sink: RecordingAuditSink,
    ) -> None:
        profile = await service.create_user("ann@example.com", "s3cret!", "Ann", "https://img/ann")

        assert profile.id in identity.accounts
        assert profile.firm_id is None
        assert profile.firm_role is None
        doc = repo.data(EntityKind.USER, profile.id)
        assert doc["email"] == "ann@example.com"
        assert doc["displayName"] == "Ann"
        assert doc["firmID"] is None
        assert doc["firmRole"] is None
        assert "password" not in doc

        await audit.drain()
        [record] = audit_sink.records
        assert record.action is Operation.CREATE_USER
        assert record.actor_id == profile.id
        assert "password" not in record.keys

    async def test_document_failure_deletes_identity_account(
        self,
        service: UserService,
        repo: InMemoryEntityRepository,
        identity: FakeIdentityProvider,
    ) -> None:
        repo.fail_writes_with = FirestoreError("down", code="UNAVAILABLE")
        with pytest.raises(UnknownException):
            await service.create_user("ann@example.com", "s3cret!", "Ann", "p")
        assert identity.accounts == {}
        assert identity.deleted == ["uid-1"]

    async def test_failed_cleanup_is_logged_and_store_error_surfaces(
        self,
        service: UserService,
        repo: InMemoryEntityRepository,
        identity: FakeIdentityProvider,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        repo.fail_writes_with = FirestoreError("down", code="UNAVAILABLE")
        identity.delete_user = AsyncMock(
            side_effect=IdentityProviderError("delete failed", code="INTERNAL")
        )
        with caplog.at_level(logging.ERROR), pytest.raises(UnknownException) as exc_info:
            await service.create_user("ann@example.com", "s3cret!", "Ann", "p")
        assert isinstance(exc_info.value.__cause__, FirestoreError)
        identity.delete_user.assert_awaited_once_with("uid-1")
        assert "Could not delete identity account uid-1" in caplog.text

    async def test_identity_failure_is_unknown(
        self, service: UserService, identity: FakeIdentityProvider, repo: InMemoryEntityRepository
    ) -> None:
        identity.add_account("existing", "ann@example.com")
        with pytest.raises(UnknownException) as exc_info:
            await service.create_user("ann@example.com", "s3cret!", "Ann", "p")
        assert isinstance(exc_info.value.__cause__, IdentityProviderError)
        assert repo.docs == {}

    async def test_missing_fields(self, service: UserService, identity: FakeIdentityProvider) -> None:
        with pytest.raises(InvalidInputException) as exc_info:
            await service.create_user("ann@example.com", "", None, "p")
        assert exc_info.value.details["fields"] == ["password", "displayName"]
        assert identity.accounts == {}


class TestUpdateUser:
    async def test_updates_identity_and_mirrors_profile(
        self,
        service: UserService,
        repo: InMemoryEntityRepository,
        identity: FakeIdentityProvider,
        audit: AuditEmitter,
        audit_sink: RecordingAuditSink,
    ) -> None:
        identity.add_account("u1", "u1@example.com", password="old")
        repo.seed_user("u1")

        await service.update_user("u1", display_name="New Name", password="n3w-pass")

        assert identity.accounts["u1"]["displayName"] == "New Name"
        assert identity.accounts["u1"]["password"] == "n3w-pass"
        doc = repo.data(EntityKind.USER, "u1")
        assert doc["displayName"] == "New Name"
        assert doc["email"] == "u1@example.com"
        assert "password" not in doc

        await audit.drain()
        [record] = audit_sink.records
        assert record.keys == {"id": "u1", "passwordChanged": True, "displayName": "New Name"}

    async def test_password_only_leaves_document_untouched(
        self, service: UserService, repo: InMemoryEntityRepository, identity: FakeIdentityProvider
    ) -> None:
        identity.add_account("u1", "u1@example.com")
        repo.seed_user("u1")
        await service.update_user("u1", password="n3w-pass")
        assert repo.commits == []

    async def test_store_failure_leaves_identity_unchanged(
        self, service: UserService, repo: InMemoryEntityRepository, identity: FakeIdentityProvider
    ) -> None:
        identity.add_account("u1", "u1@example.com", displayName="Old")
        repo.seed_user("u1")
        repo.fail_writes_with = FirestoreError("down", code="UNAVAILABLE")
        with pytest.raises(UnknownException):
            await service.update_user("u1", display_name="New", password="n3w-pass")
        assert identity.accounts["u1"] == {"email": "u1@example.com", "displayName": "Old"}
        assert repo.data(EntityKind.USER, "u1")["displayName"] == "U1"

    async def test_identity_rejection_restores_document(
        self,
        service: UserService,
        repo: InMemoryEntityRepository,
        audit: AuditEmitter,
        audit_sink: RecordingAuditSink,
    ) -> None:
        repo.seed_user("u1")
        with pytest.raises(UnknownException) as exc_info:
            await service.update_user("u1", email="new@example.com", display_name="New")
        assert isinstance(exc_info.value.__cause__, IdentityProviderError)
        doc = repo.data(EntityKind.USER, "u1")
        assert doc["email"] == "u1@example.com"
        assert doc["displayName"] == "U1"
        await audit.drain()
        assert audit_sink.records == []

    async def test_concurrent_profile_change_is_conflict(
        self, service: UserService, repo: InMemoryEntityRepository, identity: FakeIdentityProvider
    ) -> None:
        identity.add_account("u1", "u1@example.com")
        repo.seed_user("u1")
        original_get = repo.get

        async def get_then_touch(kind, entity_id):
            entity = await original_get(kind, entity_id)
            repo.touch(EntityKind.USER, "u1", displayName="Elsewhere")
            return entity

        repo.get = get_then_touch
        with pytest.raises(ConflictException):
            await service.update_user("u1", display_name="New")
        assert "displayName" not in identity.accounts["u1"]

    async def test_requires_some_field(self, service: UserService) -> None:
        with pytest.raises(InvalidInputException):
            await service.update_user("u1")

    async def test_requires_caller(self, service: UserService) -> None:
        with pytest.raises(UnauthenticatedException):
            await service.update_user(None, email="x@example.com")

    async def test_missing_user_document(self, service: UserService) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.update_user("ghost", email="x@example.com")


class TestSearchUserByEmail:
    async def test_returns_identity_record(
        self,
        service: UserService,
        identity: FakeIdentityProvider,
        audit: AuditEmitter,
        audit_sink: RecordingAuditSink,
    ) -> None:
        identity.add_account("u2", "bob@example.com", displayName="Bob")
        record = await service.search_user_by_email("u1", "bob@example.com")
        assert record.uid == "u2"
        assert record.display_name == "Bob"
        await audit.drain()
        assert audit_sink.records == []

    async def test_unknown_email_is_not_found(self, service: UserService) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.search_user_by_email("u1", "nobody@example.com")

    async def test_requires_caller(self, service: UserService) -> None:
        with pytest.raises(UnauthenticatedException):
            await service.search_user_by_email(None, "bob@example.com")
