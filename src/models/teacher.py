# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher API models."""

from pydantic import EmailStr, Field, PositiveInt

from src.models.common import RequestModel
from src.models.user import ProfileInput


class TeacherRegisterRequest(RequestModel):
    """Request to register a teacher in a school.

    The password is generated and mailed to the teacher.
    """

    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=30)
    school_id: PositiveInt
    profile: ProfileInput | None = None


class AssignClassesRequest(RequestModel):
    teacher_id: PositiveInt
    class_ids: list[PositiveInt] = Field(..., min_length=1)


class TeacherUpdateRequest(ProfileInput):
    """Sparse teacher update split between user and profile fields."""

    first_name: str | None = Field(None, min_length=2, max_length=100)
    last_name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=30)
    status: str | None = Field(None, pattern="^(ACTIVE|INACTIVE)$")
    school_id: PositiveInt | None = None
