"""Firm API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class FirmCreateRequest(BaseModel):
    """Request body for POST /firms. crew lists the user ids attached as ADMIN."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str | None = None
    crew: list[str] | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class FirmUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class FirmMemberAddRequest(BaseModel):
    """Request body for POST /firms/{firm_id}/members."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userID")


class FirmCreateResponse(BaseModel):
    id: str
