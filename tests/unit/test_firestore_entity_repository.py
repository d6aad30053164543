"""Tests for the Firestore REST adapter, with HTTP served by httpx.MockTransport."""

import json

import httpx
import pytest

from firmspace.application.dtos.writes import DocumentWrite
from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.application.use_cases import FirmService
from firmspace.domain.entities import ProjectEntity, UserEntity
from firmspace.domain.enums import EntityKind, FirmRole
from firmspace.domain.exceptions import ConflictException
from firmspace.infrastructure.exceptions import FirestoreError
from firmspace.infrastructure.firebase._rest_client import FirestoreRESTClient
from firmspace.infrastructure.firebase.repositories import FirestoreEntityRepository
from tests.fakes import RecordingAuditSink

BASE = "http://emulator/v1"
DOCS = "projects/demo/databases/(default)/documents"


def _repo(handler) -> tuple[FirestoreEntityRepository, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = FirestoreRESTClient(
        "demo",
        None,
        base_url=BASE,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(record)),
    )
    return FirestoreEntityRepository(client), seen


def _error(status: int, rpc_status: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "status": rpc_status}})


USER_DOC = {
    "name": f"{DOCS}/users/u1",
    "fields": {
        "email": {"stringValue": "u1@example.com"},
        "displayName": {"stringValue": "Ann"},
        "photoURL": {"stringValue": "https://img/ann"},
        "firmID": {"stringValue": "f1"},
        "firmRole": {"stringValue": "ADMIN"},
        "createdAt": {"timestampValue": "2025-01-02T03:04:05.123456789Z"},
    },
    "updateTime": "2025-01-02T03:04:05.999999Z",
}


class TestReads:
    async def test_get_maps_camel_case_document(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json=USER_DOC))
        user = await repo.get(EntityKind.USER, "u1")
        assert isinstance(user, UserEntity)
        assert user.display_name == "Ann"
        assert user.firm_id == "f1"
        assert user.firm_role is FirmRole.ADMIN
        assert user.created_at.microsecond == 123456
        assert user.version == "2025-01-02T03:04:05.999999Z"
        assert seen[0].url.path == f"/v1/{DOCS}/users/u1"
        assert seen[0].headers["Authorization"] == "Bearer owner"

    async def test_missing_document_is_none(self) -> None:
        repo, _ = _repo(lambda request: _error(404, "NOT_FOUND"))
        assert await repo.get(EntityKind.FIRM, "nope") is None

    async def test_get_many_preserves_order(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/projects/p1"):
                return httpx.Response(
                    200,
                    json={
                        "fields": {
                            "name": {"stringValue": "Launch"},
                            "firmID": {"stringValue": "f1"},
                            "workspaceID": {"stringValue": "w1"},
                            "startDate": {"timestampValue": "2025-03-01T09:00:00Z"},
                        },
                        "updateTime": "t1",
                    },
                )
            return _error(404, "NOT_FOUND")

        repo, _ = _repo(handler)
        missing, project = await repo.get_many(
            [(EntityKind.USER, "ghost"), (EntityKind.PROJECT, "p1")]
        )
        assert missing is None
        assert isinstance(project, ProjectEntity)
        assert project.firm_id == "f1"
        assert project.description == ""

    async def test_unreachable_store_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        repo, _ = _repo(handler)
        with pytest.raises(FirestoreError) as exc_info:
            await repo.get(EntityKind.USER, "u1")
        assert exc_info.value.code == "UNAVAILABLE"


class TestWrites:
    async def test_create_posts_with_document_id(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={}))
        await repo.apply(
            DocumentWrite.create(EntityKind.WORKSPACE, "w1", {"name": "Ops", "firmID": "f1"})
        )
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == f"/v1/{DOCS}/workspaces"
        assert request.url.params["documentId"] == "w1"
        assert json.loads(request.content)["fields"]["firmID"] == {"stringValue": "f1"}

    async def test_create_existing_id_is_conflict(self) -> None:
        repo, _ = _repo(lambda request: _error(409, "ALREADY_EXISTS"))
        with pytest.raises(ConflictException):
            await repo.apply(DocumentWrite.create(EntityKind.FIRM, "f1", {"name": "Acme"}))

    async def test_update_is_masked_and_conditional(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={}))
        await repo.apply(
            DocumentWrite.update(
                EntityKind.USER, "u2", {"firmID": None, "firmRole": None}, expected_version="t9"
            )
        )
        request = seen[0]
        assert request.method == "PATCH"
        assert request.url.params.get_list("updateMask.fieldPaths") == ["firmID", "firmRole"]
        assert request.url.params["currentDocument.updateTime"] == "t9"
        assert json.loads(request.content)["fields"]["firmID"] == {"nullValue": None}

    async def test_update_without_version_requires_existence(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={}))
        await repo.apply(DocumentWrite.update(EntityKind.FIRM, "f1", {"name": "Acme"}))
        assert seen[0].url.params["currentDocument.exists"] == "true"

    async def test_stale_update_is_conflict(self) -> None:
        repo, _ = _repo(lambda request: _error(400, "FAILED_PRECONDITION"))
        with pytest.raises(ConflictException):
            await repo.apply(
                DocumentWrite.update(EntityKind.USER, "u2", {"firmID": "f1"}, expected_version="t1")
            )

    async def test_update_of_missing_document_is_conflict(self) -> None:
        repo, _ = _repo(lambda request: _error(404, "NOT_FOUND"))
        with pytest.raises(ConflictException):
            await repo.apply(DocumentWrite.update(EntityKind.FIRM, "gone", {"name": "x"}))

    async def test_commit_sends_one_atomic_batch(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={"writeResults": []}))
        await repo.commit(
            [
                DocumentWrite.create(EntityKind.FIRM, "f1", {"name": "Acme"}),
                DocumentWrite.update(
                    EntityKind.USER, "u1", {"firmID": "f1", "firmRole": "ADMIN"}, expected_version="t3"
                ),
            ]
        )
        [request] = seen
        assert request.url.path == f"/v1/{DOCS}:commit"
        create, update = json.loads(request.content)["writes"]
        assert create["update"]["name"] == f"{DOCS}/firms/f1"
        assert create["currentDocument"] == {"exists": False}
        assert update["update"]["name"] == f"{DOCS}/users/u1"
        assert update["updateMask"] == {"fieldPaths": ["firmID", "firmRole"]}
        assert update["currentDocument"] == {"updateTime": "t3"}

    async def test_commit_precondition_failure_is_conflict(self) -> None:
        repo, _ = _repo(lambda request: _error(409, "ABORTED"))
        with pytest.raises(ConflictException):
            await repo.commit([DocumentWrite.create(EntityKind.FIRM, "f1", {"name": "Acme"})])

    async def test_empty_commit_sends_nothing(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={}))
        await repo.commit([])
        assert seen == []

    async def test_new_id_is_unique(self) -> None:
        repo, _ = _repo(lambda request: httpx.Response(200, json={}))
        assert repo.new_id(EntityKind.PROJECT) != repo.new_id(EntityKind.PROJECT)


class TestDocumentIdEscaping:
    async def test_query_characters_stay_in_the_document_path(self) -> None:
        repo, seen = _repo(lambda request: _error(404, "NOT_FOUND"))
        assert await repo.get(EntityKind.FIRM, "f1?x") is None
        [request] = seen
        assert request.url.raw_path == f"/v1/{DOCS}/firms/f1%3Fx".encode()
        assert request.url.path == f"/v1/{DOCS}/firms/f1?x"
        assert not request.url.params

    async def test_update_escapes_fragment_and_percent(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={}))
        await repo.apply(DocumentWrite.update(EntityKind.FIRM, "f1#top", {"name": "x"}))
        await repo.apply(DocumentWrite.update(EntityKind.FIRM, "f%2F1", {"name": "x"}))
        first, second = seen
        assert first.url.raw_path.startswith(f"/v1/{DOCS}/firms/f1%23top?".encode())
        assert second.url.raw_path.startswith(f"/v1/{DOCS}/firms/f%252F1?".encode())
        assert first.url.params["currentDocument.exists"] == "true"

    async def test_commit_names_keep_the_literal_id(self) -> None:
        repo, seen = _repo(lambda request: httpx.Response(200, json={"writeResults": []}))
        await repo.commit([DocumentWrite.create(EntityKind.FIRM, "f1?x", {"name": "Acme"})])
        [write] = json.loads(seen[0].content)["writes"]
        assert write["update"]["name"] == f"{DOCS}/firms/f1?x"

    async def test_update_firm_on_lookalike_id_leaves_other_firm_alone(self) -> None:
        store = {
            f"/v1/{DOCS}/firms/f1": {"name": {"stringValue": "Victim"}},
            f"/v1/{DOCS}/firms/f1?x": {"name": {"stringValue": "Mine"}},
            f"/v1/{DOCS}/users/attacker": {
                "firmID": {"stringValue": "f1?x"},
                "firmRole": {"stringValue": "ADMIN"},
            },
        }
        patched: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "PATCH":
                patched.append(request.url.path)
                return httpx.Response(200, json={})
            fields = store.get(request.url.path)
            if fields is None:
                return _error(404, "NOT_FOUND")
            return httpx.Response(200, json={"fields": fields, "updateTime": "t1"})

        repo, _ = _repo(handler)
        audit = AuditEmitter(RecordingAuditSink())
        await FirmService(repo, audit).update_firm("attacker", "f1?x", "Renamed", "p")
        await audit.drain()
        assert patched == [f"/v1/{DOCS}/firms/f1?x"]
