# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and profile API models."""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import ClassSummary, RequestModel, SchoolSummary

MaritalStatus = Literal["SINGLE", "MARRIED", "DIVORCED"]
ProfileVisibility = Literal["public", "private", "school-only"]

PROFILE_FIELDS = frozenset({
    "bio",
    "avatar",
    "middle_name",
    "nickname",
    "occupation",
    "company",
    "website",
    "social_links",
    "preferences",
    "interests",
    "marital_status",
    "nationality",
    "birth_date",
    "join_date",
    "gender",
    "address",
    "latitude",
    "longitude",
    "emergency_contacts",
    "profile_visibility",
    "profile_banner",
})


class EmergencyContact(RequestModel):
    """Emergency contact entry."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=3, max_length=30)


class ProfileInput(RequestModel):
    """Profile fields accepted on create and update.

    Only fields present in the request are written.
    """

    bio: str | None = Field(None, max_length=2000)
    avatar: str | None = Field(None, max_length=500)
    middle_name: str | None = Field(None, max_length=100)
    nickname: str | None = Field(None, max_length=100)
    occupation: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=100)
    website: str | None = Field(None, max_length=500)
    social_links: dict[str, str] | None = None
    preferences: dict[str, Any] | None = None
    interests: list[str] | None = None
    marital_status: MaritalStatus | None = None
    nationality: str | None = Field(None, max_length=100)
    birth_date: date | None = None
    join_date: date | None = None
    gender: int | None = Field(None, ge=1, le=3)
    address: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    emergency_contacts: list[EmergencyContact] | None = None
    profile_visibility: ProfileVisibility | None = None
    profile_banner: str | None = Field(None, max_length=500)

    def profile_values(self) -> dict[str, Any]:
        """Provided profile fields as plain column values."""
        values = {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if key in PROFILE_FIELDS
        }
        # profile_visibility is NOT NULL
        if values.get("profile_visibility", "") is None:
            del values["profile_visibility"]
        return values


class ProfileResponse(BaseModel):
    """Profile as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    profile_id: int = Field(validation_alias="id")
    bio: str | None = None
    avatar: str | None = None
    middle_name: str | None = None
    nickname: str | None = None
    occupation: str | None = None
    company: str | None = None
    website: str | None = None
    social_links: dict[str, Any] | None = None
    preferences: dict[str, Any] | None = None
    interests: list[str] | None = None
    marital_status: str | None = None
    nationality: str | None = None
    birth_date: date | None = None
    join_date: date | None = None
    gender: int | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    emergency_contacts: list[dict[str, Any]] | None = None
    profile_visibility: str | None = None
    profile_banner: str | None = None


class UserResponse(BaseModel):
    """User shaped for API consumers.

    Attributes:
        user_id: User id.
        roles: Role names.
        school: First school the user belongs to, if any.
        classes: Classes the user teaches.
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    status: str
    is_verified: bool
    roles: list[str] = Field(default_factory=list)
    school: SchoolSummary | None = None
    profile: ProfileResponse | None = None
    classes: list[ClassSummary] = Field(default_factory=list)
    created_at: datetime | None = None


class UserProfileUpdateRequest(ProfileInput):
    """Combined update of user scalars and profile fields."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=3, max_length=30)


class VerifyUserRequest(RequestModel):
    is_verified: bool = True
