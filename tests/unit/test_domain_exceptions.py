"""Tests for domain exceptions (error_code, message, details) and enums."""

from firmspace.domain.enums import EntityKind, FirmRole, Operation
from firmspace.domain.exceptions import (
    ConflictException,
    FirmspaceException,
    ForbiddenException,
    InvalidInputException,
    ResourceNotFoundException,
    UnauthenticatedException,
    UnknownException,
)


def test_firmspace_exception_default_error_code() -> None:
    """Base FirmspaceException uses class name as error_code when not provided."""
    exc = FirmspaceException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "FirmspaceException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "FirmspaceException", "message": "Something failed"}


def test_invalid_input_lists_fields() -> None:
    exc = InvalidInputException(fields=["id", "name"])
    assert exc.error_code == "invalid-input"
    assert exc.to_dict() == {
        "error": "invalid-input",
        "message": "Missing or invalid parameters",
        "details": {"fields": ["id", "name"]},
    }


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("firm", "f1")
    assert exc.message == "firm not found: f1"
    assert exc.error_code == "not-found"
    assert exc.details == {"resource_type": "firm", "resource_id": "f1"}


def test_codes_of_remaining_exceptions() -> None:
    assert ForbiddenException().error_code == "forbidden"
    assert ConflictException().error_code == "conflict"
    assert UnauthenticatedException().error_code == "unauthenticated"
    unknown = UnknownException()
    assert unknown.error_code == "unknown"
    assert unknown.message == "Unknown error"


def test_enum_values() -> None:
    assert EntityKind.values() == ["user", "firm", "workspace", "project"]
    assert FirmRole.values() == ["ADMIN"]
    assert "add-to-firm" in Operation.values()
    assert len(Operation.values()) == 11
