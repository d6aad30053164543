"""Identity provider adapters."""

from firmspace.infrastructure.identity.firebase_auth import (
    FirebaseIdentityProvider,
    create_identity_provider,
)

__all__ = ["FirebaseIdentityProvider", "create_identity_provider"]
