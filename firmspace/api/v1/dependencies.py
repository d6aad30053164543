"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller identity and the application
services. The process-wide context objects are created in the lifespan
and read from app.state here; routes never touch infrastructure directly.
Tests replace these with app.dependency_overrides.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from firmspace.application.interfaces import IEntityRepository, IIdentityProvider
from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.application.use_cases import (
    FirmService,
    ProjectService,
    UserService,
    WorkspaceService,
)
from firmspace.domain.exceptions import UnauthenticatedException

logger = logging.getLogger(__name__)

# auto_error=False: a missing header reaches the service, which reports
# unauthenticated through the regular error path.
bearer_scheme = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> IEntityRepository:
    """Entity repository built at startup."""
    return request.app.state.repository


def get_identity_provider(request: Request) -> IIdentityProvider:
    """Identity provider built at startup."""
    return request.app.state.identity_provider


def get_audit_emitter(request: Request) -> AuditEmitter:
    """Audit emitter built at startup."""
    return request.app.state.audit_emitter


async def get_caller_id(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    identity: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> str | None:
    """Return the verified uid of the bearer token, or None when no token was sent.

    Raises UnauthenticatedException when a token is present but invalid.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await identity.verify_id_token(credentials.credentials)
    except ValueError as e:
        logger.info("Rejected ID token: %s", e)
        raise UnauthenticatedException("Invalid or expired ID token") from e


CallerId = Annotated[str | None, Depends(get_caller_id)]


def get_user_service(
    repo: Annotated[IEntityRepository, Depends(get_repository)],
    identity: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    audit: Annotated[AuditEmitter, Depends(get_audit_emitter)],
) -> UserService:
    return UserService(repo, identity, audit)


def get_firm_service(
    repo: Annotated[IEntityRepository, Depends(get_repository)],
    audit: Annotated[AuditEmitter, Depends(get_audit_emitter)],
) -> FirmService:
    return FirmService(repo, audit)


def get_workspace_service(
    repo: Annotated[IEntityRepository, Depends(get_repository)],
    audit: Annotated[AuditEmitter, Depends(get_audit_emitter)],
) -> WorkspaceService:
    return WorkspaceService(repo, audit)


def get_project_service(
    repo: Annotated[IEntityRepository, Depends(get_repository)],
    audit: Annotated[AuditEmitter, Depends(get_audit_emitter)],
) -> ProjectService:
    return ProjectService(repo, audit)
