# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student API models."""

from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field, PositiveInt

from src.models.common import ClassSummary, ParentSummary, RequestModel, SchoolSummary
from src.models.user import ProfileInput, ProfileResponse


class ParentInfo(RequestModel):
    """Parent to find by email or create."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, min_length=3, max_length=30)


class StudentCreateRequest(RequestModel):
    """Request to create a student account with profile, classes and parents."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str | None = Field(None, min_length=6, max_length=128)
    phone: str | None = Field(None, min_length=3, max_length=30)
    school_id: PositiveInt
    grade: str = Field(..., min_length=1, max_length=50)
    section: str = Field(..., min_length=1, max_length=50)
    student_no: str = Field(..., min_length=1, max_length=50)
    admission_date: date | None = None
    guardian_name: str | None = Field(None, max_length=200)
    guardian_phone: str | None = Field(None, max_length=30)
    health_notes: str | None = None
    special_needs: str | None = None
    allergies: str | None = None
    class_ids: list[PositiveInt] = Field(default_factory=list)
    profile: ProfileInput | None = None
    parent_info: list[ParentInfo] = Field(default_factory=list)


class StudentUpdateRequest(RequestModel):
    """Partial student update.

    ``class_ids`` replaces enrollments wholesale when present. ``parent_info``
    adds parents; existing links are kept.
    """

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=3, max_length=30)
    grade: str | None = Field(None, min_length=1, max_length=50)
    section: str | None = Field(None, min_length=1, max_length=50)
    student_no: str | None = Field(None, min_length=1, max_length=50)
    admission_date: date | None = None
    guardian_name: str | None = Field(None, max_length=200)
    guardian_phone: str | None = Field(None, max_length=30)
    health_notes: str | None = None
    special_needs: str | None = None
    allergies: str | None = None
    class_ids: list[PositiveInt] | None = None
    profile: ProfileInput | None = None
    parent_info: list[ParentInfo] | None = None


class ConnectParentsRequest(RequestModel):
    parent_user_ids: list[PositiveInt] = Field(default_factory=list)


class StudentResponse(BaseModel):
    """Student with user details, school, classes and parents."""

    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    status: str
    is_verified: bool
    school_id: int
    school: SchoolSummary | None = None
    grade: str
    section: str
    student_no: str
    admission_date: date | None = None
    main_class_id: int | None = None
    guardian_name: str | None = None
    guardian_phone: str | None = None
    health_notes: str | None = None
    special_needs: str | None = None
    allergies: str | None = None
    profile: ProfileResponse | None = None
    classes: list[ClassSummary] = Field(default_factory=list)
    parents: list[ParentSummary] = Field(default_factory=list)
    created_at: datetime
