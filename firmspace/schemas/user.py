"""User API schemas.

Bodies accept camelCase field names (displayName, photoURL) as well as
snake_case. Fields are optional here; presence is checked by the service
so that a missing field is reported as invalid-input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    """Request body for POST /users."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")


class UserUpdateRequest(BaseModel):
    """Request body for PATCH /users/me; at least one field is required."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    password: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")


class UserProfileResponse(BaseModel):
    """Created user (no password)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    display_name: str = Field(alias="displayName")
    photo_url: str = Field(alias="photoURL")
    firm_id: str | None = Field(default=None, alias="firmID")
    firm_role: str | None = Field(default=None, alias="firmRole")
    created_at: datetime = Field(alias="createdAt")


class IdentityRecordResponse(BaseModel):
    """Identity account found by email."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")
    email_verified: bool = Field(default=False, alias="emailVerified")
    disabled: bool = False
