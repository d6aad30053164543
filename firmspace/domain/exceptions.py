"""Domain exceptions for firmspace.

Defines the error taxonomy every operation reports to its caller. These
exceptions are independent of infrastructure concerns; the presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class FirmspaceException(Exception):
    """Base exception for all firmspace errors surfaced to callers.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (wire value).
        details: Additional error context (e.g. missing fields, resource id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body sent to the caller."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidInputException(FirmspaceException):
    """Raised when required input is missing or empty (shape validation)."""

    def __init__(
        self,
        message: str = "Missing or invalid parameters",
        fields: list[str] | None = None,
    ) -> None:
        details = {"fields": fields} if fields else {}
        super().__init__(message, "invalid-input", details)


class ForbiddenException(FirmspaceException):
    """Raised when the caller's firm membership does not allow the mutation."""

    def __init__(self, message: str = "Operation not permitted") -> None:
        super().__init__(message, "forbidden")


class ResourceNotFoundException(FirmspaceException):
    """Raised when an entity the operation depends on does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Kind of resource (e.g. 'firm', 'workspace').
            resource_id: The ID (or lookup key) that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "not-found",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(FirmspaceException):
    """Raised when a write precondition fails at commit time.

    Either the document changed between fetch and commit (concurrent caller),
    a create targeted an id that already exists, or an update targeted a
    document that no longer exists. Nothing from the write was applied.
    """

    def __init__(self, message: str = "Entity changed concurrently; retry") -> None:
        super().__init__(message, "conflict")


class UnauthenticatedException(FirmspaceException):
    """Raised when no verified caller identity is present where one is required."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "unauthenticated")


class UnknownException(FirmspaceException):
    """Raised when the document store or identity provider fails.

    The underlying error is logged server-side and chained as __cause__;
    the caller only sees an opaque message.
    """

    def __init__(self, message: str = "Unknown error") -> None:
        super().__init__(message, "unknown")
