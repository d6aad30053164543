"""User API: registration, own-account update, lookup by email."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from firmspace.api.v1.dependencies import CallerId, get_user_service
from firmspace.application.use_cases import UserService
from firmspace.core.limiter import limit_create_user, limit_writes
from firmspace.schemas.user import (
    IdentityRecordResponse,
    UserCreateRequest,
    UserProfileResponse,
    UserUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
@limit_create_user
async def create_user(
    request: Request,
    body: UserCreateRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Register an identity account and its user document. No authentication."""
    profile = await service.create_user(
        email=body.email,
        password=body.password,
        display_name=body.display_name,
        photo_url=body.photo_url,
    )
    return UserProfileResponse(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        photo_url=profile.photo_url,
        firm_id=profile.firm_id,
        firm_role=profile.firm_role.value if profile.firm_role else None,
        created_at=profile.created_at,
    )


@router.patch("/me", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def update_me(
    request: Request,
    body: UserUpdateRequest,
    caller_id: CallerId,
    service: Annotated[UserService, Depends(get_user_service)],
) -> None:
    """Update the caller's own email, password, display name or photo."""
    await service.update_user(
        caller_id,
        email=body.email,
        password=body.password,
        display_name=body.display_name,
        photo_url=body.photo_url,
    )


@router.get("/search", response_model=IdentityRecordResponse)
async def search_by_email(
    caller_id: CallerId,
    service: Annotated[UserService, Depends(get_user_service)],
    email: Annotated[str | None, Query()] = None,
):
    """Find the identity account registered with an email address."""
    record = await service.search_user_by_email(caller_id, email)
    return IdentityRecordResponse(
        uid=record.uid,
        email=record.email,
        display_name=record.display_name,
        photo_url=record.photo_url,
        email_verified=record.email_verified,
        disabled=record.disabled,
    )
