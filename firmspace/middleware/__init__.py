"""ASGI middleware."""

from firmspace.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
