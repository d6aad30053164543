"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment bundle small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.

Writes always carry a precondition so that check-then-act callers can
detect concurrent changes: creates require the document to be absent,
updates require it to exist or to still have the update time that was read.
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import httpx

from firmspace.infrastructure.exceptions import (
    DocumentExistsError,
    FirestoreError,
    PreconditionFailedError,
)
from firmspace.infrastructure.firebase._rest_encoding import (
    decode_fields,
    encode_document,
    encode_fields,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"
# The emulator accepts this bearer token as an admin credential.
EMULATOR_TOKEN = "owner"

_PRECONDITION_STATUSES = frozenset({"FAILED_PRECONDITION", "ABORTED", "NOT_FOUND"})


def _get_credentials(key_dict: dict, scopes: list[str] | None = None):
    """Return google.oauth2.service_account.Credentials for the given scopes."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=scopes or [_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _error_status(resp: httpx.Response) -> str | None:
    """Return the google.rpc status name from an error body (e.g. 'ALREADY_EXISTS')."""
    try:
        payload = resp.json()
    except ValueError:
        return None
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    error = payload.get("error") if isinstance(payload, dict) else None
    return error.get("status") if isinstance(error, dict) else None


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: list[tuple[str, str]] | None = None,
    missing_ok: bool = True,
) -> dict | None:
    """Perform async HTTP request to Firestore REST API.

    404 returns None when missing_ok; otherwise it is a failed precondition
    (update of a document that does not exist).
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(method, url, headers=headers, json=body, params=params)
    except httpx.HTTPError as e:
        raise FirestoreError(f"Firestore {method} request failed: {e!s}", code="UNAVAILABLE") from e
    if resp.status_code in (200, 204):
        if method == "DELETE" or not resp.content:
            return {}
        return resp.json()
    status = _error_status(resp)
    if resp.status_code == 404 and missing_ok:
        return None
    if resp.status_code == 409 and status != "ABORTED":
        raise DocumentExistsError("Document already exists", code=status, status_code=409)
    if resp.status_code == 404 or status in _PRECONDITION_STATUSES:
        raise PreconditionFailedError(
            "Write precondition failed", code=status, status_code=resp.status_code
        )
    raise FirestoreError(
        f"Firestore {method} failed with HTTP {resp.status_code}",
        code=status,
        status_code=resp.status_code,
    )


def _precondition(exists: bool | None = None, update_time: str | None = None) -> dict:
    if update_time is not None:
        return {"updateTime": update_time}
    return {"exists": bool(exists)}


def create_write(name: str, data: dict[str, Any]) -> dict:
    """Commit write that creates `name`; fails if the document already exists."""
    return {
        "update": {"name": name, "fields": encode_fields(data)},
        "currentDocument": _precondition(exists=False),
    }


def update_write(
    name: str, data: dict[str, Any], last_update_time: str | None = None
) -> dict:
    """Commit write that merges `data` into `name`.

    Without last_update_time the document only has to exist; with it, the
    stored update time must still equal the value that was read.
    """
    return {
        "update": {"name": name, "fields": encode_fields(data)},
        "updateMask": {"fieldPaths": list(data)},
        "currentDocument": _precondition(exists=True, update_time=last_update_time),
    }


class DocumentSnapshot:
    """Snapshot of a document (id + data + update time)."""

    def __init__(self, id_: str, data: dict, update_time: str | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    @property
    def path(self) -> str:
        """Full resource name (projects/.../documents/<collection>/<id>)."""
        return self._path

    @property
    def url(self) -> str:
        """REST URL with every path segment percent-encoded.

        Document ids may contain "?", "#" or "%"; unescaped they would change
        which document the request addresses.
        """
        return self._client.url(
            "/".join(quote(segment, safe="()") for segment in self._path.split("/"))
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            self.url,
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(
            self.id, decode_fields(out.get("fields")), out.get("updateTime")
        )

    async def update(
        self, data: dict[str, Any], last_update_time: str | None = None
    ) -> None:
        """Merge `data` into the existing document (masked PATCH with precondition).

        Raises PreconditionFailedError if the document is missing or, when
        last_update_time is given, was modified since it was read.
        """
        params = [("updateMask.fieldPaths", field) for field in data]
        if last_update_time is not None:
            params.append(("currentDocument.updateTime", last_update_time))
        else:
            params.append(("currentDocument.exists", "true"))
        await _request_async(
            self._client._http,
            self.url,
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            params=params,
            missing_ok=False,
        )


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        await _request_async(
            self._client._http,
            self._client.url(self._path),
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            params=[("documentId", document_id)],
            missing_ok=False,
        )


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin).

    credentials=None means emulator mode: requests use the emulator's
    admin token instead of an OAuth access token.
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        if self._credentials is None:
            return EMULATOR_TOKEN
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def url(self, resource: str) -> str:
        return f"{self._base_url}/{resource}"

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    async def commit(self, writes: list[dict]) -> None:
        """Apply all writes atomically (documents:commit). Empty list is a no-op.

        If any precondition fails, none of the writes are applied and
        PreconditionFailedError (or DocumentExistsError) is raised.
        """
        if not writes:
            return
        await _request_async(
            self._http,
            self.url(f"{self._prefix}:commit"),
            method="POST",
            body={"writes": writes},
            access_token=await self.get_token(),
            missing_ok=False,
        )
