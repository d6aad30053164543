"""Firm API: create, update, membership."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from firmspace.api.v1.dependencies import CallerId, get_firm_service
from firmspace.application.use_cases import FirmService
from firmspace.core.limiter import limit_writes
from firmspace.schemas.firm import (
    FirmCreateRequest,
    FirmCreateResponse,
    FirmMemberAddRequest,
    FirmUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=FirmCreateResponse, status_code=status.HTTP_201_CREATED)
@limit_writes
async def create_firm(
    request: Request,
    body: FirmCreateRequest,
    caller_id: CallerId,
    service: Annotated[FirmService, Depends(get_firm_service)],
):
    """Create a firm and attach its crew atomically."""
    await service.create_firm(
        caller_id, body.id, body.name, body.crew, body.photo_url
    )
    return FirmCreateResponse(id=body.id)


@router.put("/{firm_id}", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def update_firm(
    request: Request,
    firm_id: str,
    body: FirmUpdateRequest,
    caller_id: CallerId,
    service: Annotated[FirmService, Depends(get_firm_service)],
) -> None:
    await service.update_firm(caller_id, firm_id, body.name, body.photo_url)


@router.post("/{firm_id}/members", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def add_member(
    request: Request,
    firm_id: str,
    body: FirmMemberAddRequest,
    caller_id: CallerId,
    service: Annotated[FirmService, Depends(get_firm_service)],
) -> None:
    """Attach an unattached user to the firm."""
    await service.add_member(caller_id, firm_id, body.user_id)


@router.delete("/{firm_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
@limit_writes
async def remove_member(
    request: Request,
    firm_id: str,
    user_id: str,
    caller_id: CallerId,
    service: Annotated[FirmService, Depends(get_firm_service)],
) -> None:
    """Detach a member from the firm."""
    await service.remove_member(caller_id, firm_id, user_id)
