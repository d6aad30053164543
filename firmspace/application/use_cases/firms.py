"""Firm operations: create, update, add member, remove member."""

from __future__ import annotations

from typing import cast

from firmspace.application.dtos.writes import DocumentWrite
from firmspace.application.services.invariant_validator import (
    check_add_to_firm,
    check_authenticated,
    check_create_firm,
    check_document_ids,
    check_remove_from_firm,
    check_update_firm,
    require_params,
)
from firmspace.application.use_cases.base import MutationService
from firmspace.domain.entities import FirmEntity, UserEntity
from firmspace.domain.enums import EntityKind, FirmRole, Operation
from firmspace.shared.utils.datetime import utc_now


class FirmService(MutationService):
    """Creates firms and manages firm membership.

    Membership writes are conditional on the target user's fetched version,
    so two callers racing to attach the same user cannot both succeed.
    """

    async def create_firm(
        self,
        caller_id: str | None,
        firm_id: str | None,
        name: str | None,
        crew: list[str] | None,
        photo_url: str | None,
    ) -> None:
        """Create the firm and attach every crew member as ADMIN in one atomic batch."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(id=firm_id, name=name, crew=crew, photoURL=photo_url).raise_for_denial()
        crew_ids = list(dict.fromkeys(crew))
        require_params(
            **{f"crew[{i}]": user_id for i, user_id in enumerate(crew_ids)}
        ).raise_for_denial()
        check_document_ids(
            id=firm_id, **{f"crew[{i}]": user_id for i, user_id in enumerate(crew_ids)}
        ).raise_for_denial()

        async with self.upstream(Operation.CREATE_FIRM):
            members = await self.repo.get_many(
                [(EntityKind.USER, user_id) for user_id in crew_ids]
            )
            crew_users = cast(list[UserEntity | None], members)
            check_create_firm(firm_id, crew_ids, crew_users).raise_for_denial()

            writes = [
                DocumentWrite.create(
                    EntityKind.FIRM,
                    firm_id,
                    {
                        "name": name,
                        "photoURL": photo_url,
                        "createdBy": caller_id,
                        "createdAt": utc_now(),
                    },
                )
            ]
            writes.extend(
                DocumentWrite.update(
                    EntityKind.USER,
                    user.id,
                    {"firmID": firm_id, "firmRole": FirmRole.ADMIN.value},
                    expected_version=user.version,
                )
                for user in crew_users
                if user is not None
            )
            await self.repo.commit(writes)

        self.record(
            Operation.CREATE_FIRM,
            caller_id,
            id=firm_id,
            name=name,
            crew=crew_ids,
            photoURL=photo_url,
        )

    async def update_firm(
        self,
        caller_id: str | None,
        firm_id: str | None,
        name: str | None,
        photo_url: str | None,
    ) -> None:
        """Rename / re-image a firm. Only members of the firm may do this."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(id=firm_id, name=name, photoURL=photo_url).raise_for_denial()
        check_document_ids(id=firm_id).raise_for_denial()

        async with self.upstream(Operation.UPDATE_FIRM):
            caller, firm = await self.repo.get_many(
                [(EntityKind.USER, caller_id), (EntityKind.FIRM, firm_id)]
            )
            check_update_firm(
                caller_id,
                cast(UserEntity | None, caller),
                firm_id,
                cast(FirmEntity | None, firm),
            ).raise_for_denial()
            await self.repo.apply(
                DocumentWrite.update(
                    EntityKind.FIRM, firm_id, {"name": name, "photoURL": photo_url}
                )
            )

        self.record(
            Operation.UPDATE_FIRM, caller_id, id=firm_id, name=name, photoURL=photo_url
        )

    async def add_member(
        self,
        caller_id: str | None,
        firm_id: str | None,
        user_id: str | None,
    ) -> None:
        """Attach an unattached user to the caller's firm as ADMIN."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(userID=user_id, firmID=firm_id).raise_for_denial()
        check_document_ids(userID=user_id, firmID=firm_id).raise_for_denial()

        async with self.upstream(Operation.ADD_TO_FIRM):
            user, firm, caller = await self.repo.get_many(
                [
                    (EntityKind.USER, user_id),
                    (EntityKind.FIRM, firm_id),
                    (EntityKind.USER, caller_id),
                ]
            )
            check_add_to_firm(
                caller_id,
                cast(UserEntity | None, caller),
                firm_id,
                cast(FirmEntity | None, firm),
                user_id,
                cast(UserEntity | None, user),
            ).raise_for_denial()
            await self.repo.apply(
                DocumentWrite.update(
                    EntityKind.USER,
                    user_id,
                    {"firmID": firm_id, "firmRole": FirmRole.ADMIN.value},
                    expected_version=user.version,
                )
            )

        self.record(Operation.ADD_TO_FIRM, caller_id, firmID=firm_id, userID=user_id)

    async def remove_member(
        self,
        caller_id: str | None,
        firm_id: str | None,
        user_id: str | None,
    ) -> None:
        """Detach a member of the caller's firm (firmID and firmRole back to null)."""
        check_authenticated(caller_id).raise_for_denial()
        require_params(userID=user_id, firmID=firm_id).raise_for_denial()
        check_document_ids(userID=user_id, firmID=firm_id).raise_for_denial()

        async with self.upstream(Operation.REMOVE_FROM_FIRM):
            user, firm, caller = await self.repo.get_many(
                [
                    (EntityKind.USER, user_id),
                    (EntityKind.FIRM, firm_id),
                    (EntityKind.USER, caller_id),
                ]
            )
            check_remove_from_firm(
                caller_id,
                cast(UserEntity | None, caller),
                firm_id,
                cast(FirmEntity | None, firm),
                user_id,
                cast(UserEntity | None, user),
            ).raise_for_denial()
            await self.repo.apply(
                DocumentWrite.update(
                    EntityKind.USER,
                    user_id,
                    {"firmID": None, "firmRole": None},
                    expected_version=user.version,
                )
            )

        self.record(
            Operation.REMOVE_FROM_FIRM, caller_id, firmID=firm_id, userID=user_id
        )
