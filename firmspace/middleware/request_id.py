"""Request ID middleware.

Forwards a client-supplied request id when it is safe to log, otherwise
generates one, and echoes it on the response. Raw ASGI (no
BaseHTTPMiddleware), so streaming and background tasks are unaffected.
"""

import re
import uuid
from collections.abc import Callable

REQUEST_ID_MAX_LENGTH = 64
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def _header(scope: dict, name: str) -> str | None:
    """Return the first value of a header (case-insensitive), decoded."""
    wanted = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return raw (stripped) if it is a safe id, else a fresh UUID4."""
    candidate = (raw or "").strip()
    if _SAFE_REQUEST_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Attach a request id to scope["state"] and to every HTTP response."""
    encoded_name = header_name.encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (encoded_name, request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_request_id)

    return asgi_app
