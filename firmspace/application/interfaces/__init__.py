"""Application ports implemented by infrastructure."""

from firmspace.application.interfaces.repositories import IEntityRepository
from firmspace.application.interfaces.services import IAuditSink, IIdentityProvider

__all__ = ["IAuditSink", "IEntityRepository", "IIdentityProvider"]
