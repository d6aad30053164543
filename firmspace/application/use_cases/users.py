"""User operations: register, update own account, search by email."""

from __future__ import annotations

import logging
from typing import cast

from firmspace.application.dtos.user import IdentityRecord, UserProfile
from firmspace.application.dtos.writes import DocumentWrite
from firmspace.application.interfaces.repositories import IEntityRepository
from firmspace.application.interfaces.services import IIdentityProvider
from firmspace.application.services.audit_emitter import AuditEmitter
from firmspace.application.services.invariant_validator import (
    check_authenticated,
    check_update_user,
    is_blank,
    require_any_param,
    require_params,
)
from firmspace.application.use_cases.base import MutationService
from firmspace.domain.entities import UserEntity
from firmspace.domain.enums import EntityKind, Operation
from firmspace.domain.exceptions import ResourceNotFoundException
from firmspace.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class UserService(MutationService):
    """User accounts span the identity provider and the users collection.

    The identity account is the source of truth for credentials; the user
    document mirrors the profile fields and holds the firm binding. Passwords
    are only ever sent to the identity provider.
    """

    def __init__(
        self,
        repo: IEntityRepository,
        identity: IIdentityProvider,
        audit: AuditEmitter,
    ) -> None:
        super().__init__(repo, audit)
        self.identity = identity

    async def create_user(
        self,
        email: str | None,
        password: str | None,
        display_name: str | None,
        photo_url: str | None,
    ) -> UserProfile:
        """Register a new identity account and its unattached user document.

        No caller identity is required. If the user document cannot be
        written, the identity account is deleted again.
        """
        require_params(
            email=email, password=password, displayName=display_name, photoURL=photo_url
        ).raise_for_denial()

        async with self.upstream(Operation.CREATE_USER):
            account = await self.identity.create_user(
                email, password, display_name, photo_url
            )
            created_at = utc_now()
            try:
                await self.repo.apply(
                    DocumentWrite.create(
                        EntityKind.USER,
                        account.uid,
                        {
                            "email": email,
                            "displayName": display_name,
                            "photoURL": photo_url,
                            "firmID": None,
                            "firmRole": None,
                            "createdAt": created_at,
                        },
                    )
                )
            except Exception:
                await self._delete_orphan_identity(account.uid)
                raise

        self.record(
            Operation.CREATE_USER,
            account.uid,
            id=account.uid,
            email=email,
            displayName=display_name,
            photoURL=photo_url,
        )
        return UserProfile(
            id=account.uid,
            email=email,
            display_name=display_name,
            photo_url=photo_url,
            firm_id=None,
            firm_role=None,
            created_at=created_at,
        )

    async def _delete_orphan_identity(self, uid: str) -> None:
        try:
            await self.identity.delete_user(uid)
        except Exception:
            logger.exception("Could not delete identity account %s after failed registration", uid)

    async def update_user(
        self,
        caller_id: str | None,
        email: str | None = None,
        password: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> None:
        """Update the caller's own account; blank fields are left unchanged.

        The user document is written first. If the identity provider then
        rejects the change, the previous profile fields are written back.
        """
        check_authenticated(caller_id).raise_for_denial()
        require_any_param(
            email=email, password=password, displayName=display_name, photoURL=photo_url
        ).raise_for_denial()

        changes = {
            field: value
            for field, value in (
                ("email", email),
                ("displayName", display_name),
                ("photoURL", photo_url),
            )
            if not is_blank(value)
        }
        new_password = None if is_blank(password) else password

        async with self.upstream(Operation.UPDATE_USER):
            caller = cast(
                UserEntity | None, await self.repo.get(EntityKind.USER, caller_id)
            )
            check_update_user(caller_id, caller).raise_for_denial()
            if changes:
                await self.repo.apply(
                    DocumentWrite.update(
                        EntityKind.USER, caller_id, changes, expected_version=caller.version
                    )
                )
            try:
                await self.identity.update_user(
                    caller_id,
                    email=changes.get("email"),
                    password=new_password,
                    display_name=changes.get("displayName"),
                    photo_url=changes.get("photoURL"),
                )
            except Exception:
                if changes:
                    await self._restore_profile(caller, changes)
                raise

        self.record(
            Operation.UPDATE_USER,
            caller_id,
            id=caller_id,
            passwordChanged=new_password is not None,
            **changes,
        )

    async def _restore_profile(self, caller: UserEntity, changes: dict[str, str]) -> None:
        previous = {
            "email": caller.email,
            "displayName": caller.display_name,
            "photoURL": caller.photo_url,
        }
        try:
            await self.repo.apply(
                DocumentWrite.update(
                    EntityKind.USER,
                    caller.id,
                    {field: previous[field] for field in changes},
                )
            )
        except Exception:
            logger.exception(
                "Could not restore profile of user %s after failed identity update",
                caller.id,
            )

    async def search_user_by_email(
        self, caller_id: str | None, email: str | None
    ) -> IdentityRecord:
        """Look up an identity account by email (read-only, not audited)."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(email=email).raise_for_denial()

        async with self.upstream(Operation.SEARCH_USER_BY_EMAIL):
            account = await self.identity.get_user_by_email(email)
        if account is None:
            raise ResourceNotFoundException("user", email)
        logger.info("User %s looked up account %s by email", caller_id, account.uid)
        return account
