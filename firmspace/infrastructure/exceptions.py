"""Infrastructure exceptions for the document store and identity provider.

These never reach callers directly: repositories translate precondition
failures into ConflictException, and services wrap everything else into
UnknownException after logging it.
"""


class FirestoreError(Exception):
    """Firestore REST call failed (transport error or non-success status)."""

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None) -> None:
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class PreconditionFailedError(FirestoreError):
    """A write precondition did not hold (stale update time, missing document, aborted)."""


class DocumentExistsError(PreconditionFailedError):
    """createDocument or an exists=false precondition hit an existing document ID."""


class IdentityProviderError(Exception):
    """Identity Toolkit call failed; code is the provider's error code (e.g. EMAIL_EXISTS)."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)
