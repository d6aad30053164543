"""Authorization and invariant checks for every mutation.

Pure functions: each takes the shape-checked input (and, where the caller
matters, the caller id) plus the snapshots a service fetched, and returns a
Decision. Nothing
here touches the store, so a Decision depends only on its arguments.

Authorization is derived from firm membership: only a user whose firm_id
equals the target firm may change that firm's membership, workspaces or
projects. A user joins a firm only while unattached.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from firmspace.domain.entities import (
    FirmEntity,
    ProjectEntity,
    UserEntity,
    WorkspaceEntity,
)
from firmspace.domain.exceptions import (
    ForbiddenException,
    InvalidInputException,
    ResourceNotFoundException,
    UnauthenticatedException,
)

# Firestore rejects these as document ids; '/' would address a subcollection.
_RESERVED_IDS = frozenset({".", ".."})
_MAX_ID_BYTES = 1500


class DenialReason(str, Enum):
    """Why a mutation was refused; one exception type per reason."""

    INVALID_INPUT = "invalid-input"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not-found"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Decision:
    """Accept/reject outcome of a check."""

    allowed: bool
    reason: DenialReason | None = None
    message: str = ""
    fields: tuple[str, ...] = ()
    resource: tuple[str, str] | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(allowed=True)

    @classmethod
    def invalid(cls, message: str, fields: Sequence[str] = ()) -> Decision:
        return cls(False, DenialReason.INVALID_INPUT, message, tuple(fields))

    @classmethod
    def forbidden(cls, message: str) -> Decision:
        return cls(False, DenialReason.FORBIDDEN, message)

    @classmethod
    def not_found(cls, resource_type: str, resource_id: str) -> Decision:
        return cls(
            False,
            DenialReason.NOT_FOUND,
            f"{resource_type} not found: {resource_id}",
            resource=(resource_type, resource_id),
        )

    @classmethod
    def unauthenticated(cls) -> Decision:
        return cls(False, DenialReason.UNAUTHENTICATED, "Authentication required")

    def raise_for_denial(self) -> None:
        """Raise the exception mapped to the denial reason; no-op when allowed."""
        if self.allowed:
            return
        if self.reason is DenialReason.INVALID_INPUT:
            raise InvalidInputException(self.message, list(self.fields) or None)
        if self.reason is DenialReason.NOT_FOUND and self.resource:
            raise ResourceNotFoundException(*self.resource)
        if self.reason is DenialReason.UNAUTHENTICATED:
            raise UnauthenticatedException(self.message)
        raise ForbiddenException(self.message)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


def check_authenticated(caller_id: str | None) -> Decision:
    """Deny when no verified caller identity is present."""
    if not caller_id:
        return Decision.unauthenticated()
    return Decision.allow()


def require_params(**fields: Any) -> Decision:
    """Deny with the names of every field that is absent or empty."""
    missing = [name for name, value in fields.items() if is_blank(value)]
    if missing:
        return Decision.invalid(
            f"Missing required parameters: {', '.join(missing)}", missing
        )
    return Decision.allow()


def require_any_param(**fields: Any) -> Decision:
    """Deny unless at least one field is present and non-empty."""
    if all(is_blank(value) for value in fields.values()):
        names = list(fields)
        return Decision.invalid(
            f"At least one of these parameters is required: {', '.join(names)}",
            names,
        )
    return Decision.allow()


def check_document_ids(**ids: str) -> Decision:
    """Deny ids the document store cannot use as document names."""
    bad = [
        name
        for name, value in ids.items()
        if "/" in value
        or value in _RESERVED_IDS
        or len(value.encode("utf-8")) > _MAX_ID_BYTES
        or (value.startswith("__") and value.endswith("__"))
    ]
    if bad:
        return Decision.invalid(f"Invalid identifiers: {', '.join(bad)}", bad)
    return Decision.allow()


def _require_same_firm(
    caller_id: str, caller: UserEntity | None, firm_id: str, what: str
) -> Decision:
    if caller is None or not caller.is_member_of(firm_id):
        return Decision.forbidden(
            f"User {caller_id} is not a member of the firm owning this {what}"
        )
    return Decision.allow()


def check_create_firm(
    firm_id: str,
    crew_ids: Sequence[str],
    crew: Sequence[UserEntity | None],
) -> Decision:
    """Every crew id must be an existing, currently unattached user.

    The firm document and every crew attachment are committed as one batch,
    so a single bad crew member rejects the whole creation.
    """
    for user_id, user in zip(crew_ids, crew, strict=True):
        if user is None:
            return Decision.not_found("user", user_id)
    attached = [user.id for user in crew if user is not None and user.is_attached]
    if attached:
        return Decision.forbidden(
            f"Cannot create firm {firm_id}; users already belong to a firm: "
            f"{', '.join(attached)}"
        )
    return Decision.allow()


def check_update_firm(
    caller_id: str,
    caller: UserEntity | None,
    firm_id: str,
    firm: FirmEntity | None,
) -> Decision:
    """Firm must exist and the caller must be one of its members."""
    if firm is None:
        return Decision.not_found("firm", firm_id)
    if caller is None or not caller.is_member_of(firm_id):
        return Decision.forbidden(f"User {caller_id} is not a member of firm {firm_id}")
    return Decision.allow()


def check_add_to_firm(
    caller_id: str,
    caller: UserEntity | None,
    firm_id: str,
    firm: FirmEntity | None,
    user_id: str,
    user: UserEntity | None,
) -> Decision:
    """Caller must belong to the firm; the target must be unattached."""
    if firm is None:
        return Decision.not_found("firm", firm_id)
    if user is None:
        return Decision.not_found("user", user_id)
    if caller is None or not caller.is_member_of(firm_id):
        return Decision.forbidden(f"User {caller_id} is not a member of firm {firm_id}")
    if user.is_attached:
        return Decision.forbidden(f"User {user_id} already belongs to a firm")
    return Decision.allow()


def check_remove_from_firm(
    caller_id: str,
    caller: UserEntity | None,
    firm_id: str,
    firm: FirmEntity | None,
    user_id: str,
    user: UserEntity | None,
) -> Decision:
    """Caller and target must both currently belong to the firm."""
    if firm is None:
        return Decision.not_found("firm", firm_id)
    if user is None:
        return Decision.not_found("user", user_id)
    if caller is None or not caller.is_member_of(firm_id):
        return Decision.forbidden(f"User {caller_id} is not a member of firm {firm_id}")
    if not user.is_member_of(firm_id):
        return Decision.forbidden(f"User {user_id} does not belong to firm {firm_id}")
    return Decision.allow()


def check_create_workspace(caller_id: str, caller: UserEntity | None) -> Decision:
    """Caller must belong to a firm; the workspace is created inside it."""
    if caller is None or not caller.is_attached:
        return Decision.forbidden(f"User {caller_id} does not belong to a firm")
    return Decision.allow()


def check_update_workspace(
    caller_id: str,
    caller: UserEntity | None,
    workspace_id: str,
    workspace: WorkspaceEntity | None,
) -> Decision:
    if workspace is None:
        return Decision.not_found("workspace", workspace_id)
    return _require_same_firm(caller_id, caller, workspace.firm_id, "workspace")


def check_create_project(
    caller_id: str,
    caller: UserEntity | None,
    workspace_id: str,
    workspace: WorkspaceEntity | None,
) -> Decision:
    if workspace is None:
        return Decision.not_found("workspace", workspace_id)
    return _require_same_firm(caller_id, caller, workspace.firm_id, "workspace")


def check_update_project(
    caller_id: str,
    caller: UserEntity | None,
    project_id: str,
    project: ProjectEntity | None,
) -> Decision:
    if project is None:
        return Decision.not_found("project", project_id)
    return _require_same_firm(caller_id, caller, project.firm_id, "project")


def check_update_user(caller_id: str, caller: UserEntity | None) -> Decision:
    """The caller's own user document must exist."""
    if caller is None:
        return Decision.not_found("user", caller_id)
    return Decision.allow()
