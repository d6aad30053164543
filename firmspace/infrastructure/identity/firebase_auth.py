"""Firebase Authentication adapter (Identity Toolkit REST, no firebase-admin).

Account management goes through the Identity Toolkit v1 admin endpoints
with a service-account access token; ID tokens are verified against
Google's public certificates. Against the Auth emulator the admin token is
"owner" and emulator-issued tokens are unsigned, so only their claims are
checked.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from jose import JWTError, jwt

from firmspace.application.dtos.user import IdentityRecord
from firmspace.core.config import Settings
from firmspace.infrastructure.exceptions import IdentityProviderError
from firmspace.infrastructure.firebase._rest_client import (
    EMULATOR_TOKEN,
    _get_access_token,
    _get_credentials,
)
from firmspace.infrastructure.firebase.client import resolve_project_id

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
_IDENTITY_SCOPES = [
    "https://www.googleapis.com/auth/identitytoolkit",
    "https://www.googleapis.com/auth/cloud-platform",
]


def _verify_firebase_token(token: str, project_id: str) -> dict[str, Any]:
    from google.auth.transport.requests import Request
    from google.oauth2 import id_token

    return id_token.verify_firebase_token(token, Request(), audience=project_id)


def _error_code(resp: httpx.Response) -> str | None:
    """Return the provider error code, e.g. 'EMAIL_EXISTS' from 'EMAIL_EXISTS : ...'."""
    try:
        error = resp.json().get("error") or {}
    except ValueError:
        return None
    message = error.get("message") if isinstance(error, dict) else None
    if not message:
        return None
    return message.split(" ", 1)[0].strip(":")


def _to_record(account: dict[str, Any]) -> IdentityRecord:
    return IdentityRecord(
        uid=account["localId"],
        email=account.get("email"),
        display_name=account.get("displayName"),
        photo_url=account.get("photoUrl"),
        email_verified=bool(account.get("emailVerified", False)),
        disabled=bool(account.get("disabled", False)),
    )


class FirebaseIdentityProvider:
    """Implements IIdentityProvider against Firebase Authentication.

    credentials=None means emulator mode.
    """

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        base_url: str = IDENTITY_TOOLKIT_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def emulated(self) -> bool:
        return self._credentials is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _token(self) -> str:
        if self._credentials is None:
            return EMULATOR_TOKEN
        return await asyncio.to_thread(_get_access_token, self._credentials)

    async def _call(self, action: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST to projects/{project}/accounts[:action] and return the JSON body."""
        url = f"{self._base_url}/projects/{self._project_id}/accounts{action}"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {await self._token()}",
        }
        try:
            resp = await self._http.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise IdentityProviderError(
                f"Identity Toolkit request failed: {e!s}", code="UNAVAILABLE"
            ) from e
        if resp.status_code != 200:
            code = _error_code(resp)
            raise IdentityProviderError(
                f"Identity Toolkit {action or 'signUp'} failed with HTTP {resp.status_code}",
                code=code,
            )
        return resp.json() if resp.content else {}

    async def verify_id_token(self, token: str) -> str:
        """Return the uid (sub claim) of a valid ID token for this project.

        Raises:
            ValueError: If the token is malformed, expired, or issued for
                another project.
        """
        if self.emulated:
            try:
                claims = jwt.get_unverified_claims(token)
            except JWTError as e:
                raise ValueError("Malformed ID token") from e
            if claims.get("aud") != self._project_id:
                raise ValueError("ID token audience does not match project")
        else:
            try:
                claims = await asyncio.to_thread(
                    _verify_firebase_token, token, self._project_id
                )
            except Exception as e:
                raise ValueError(f"Invalid ID token: {e!s}") from e
        uid = claims.get("sub") or claims.get("user_id")
        if not uid:
            raise ValueError("ID token has no subject")
        return uid

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        photo_url: str,
    ) -> IdentityRecord:
        out = await self._call(
            "",
            {
                "email": email,
                "password": password,
                "displayName": display_name,
                "photoUrl": photo_url,
            },
        )
        logger.info("Created identity account %s", out.get("localId"))
        return IdentityRecord(
            uid=out["localId"],
            email=out.get("email", email),
            display_name=out.get("displayName", display_name),
            photo_url=out.get("photoUrl", photo_url),
        )

    async def update_user(
        self,
        uid: str,
        *,
        email: str | None = None,
        password: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> None:
        body: dict[str, Any] = {"localId": uid}
        if email is not None:
            body["email"] = email
        if password is not None:
            body["password"] = password
        if display_name is not None:
            body["displayName"] = display_name
        if photo_url is not None:
            body["photoUrl"] = photo_url
        await self._call(":update", body)

    async def delete_user(self, uid: str) -> None:
        await self._call(":delete", {"localId": uid})
        logger.info("Deleted identity account %s", uid)

    async def get_user_by_email(self, email: str) -> IdentityRecord | None:
        out = await self._call(":lookup", {"email": [email]})
        users = out.get("users") or []
        if not users:
            return None
        return _to_record(users[0])


def create_identity_provider(settings: Settings) -> FirebaseIdentityProvider:
    """Build the identity provider from settings (service account or emulator).

    Raises:
        ValueError: If credentials are malformed or the project id is unknown.
    """
    if settings.firebase_auth_emulator_host:
        project_id = resolve_project_id(settings, None)
        logger.info(
            "Using Auth emulator at %s (project %s)",
            settings.firebase_auth_emulator_host,
            project_id,
        )
        return FirebaseIdentityProvider(
            project_id,
            None,
            base_url=(
                f"http://{settings.firebase_auth_emulator_host}"
                "/identitytoolkit.googleapis.com/v1"
            ),
            timeout=settings.http_timeout_seconds,
        )

    key_dict = settings.load_service_account()
    project_id = resolve_project_id(settings, key_dict)
    return FirebaseIdentityProvider(
        project_id,
        _get_credentials(key_dict, scopes=_IDENTITY_SCOPES),
        timeout=settings.http_timeout_seconds,
    )
