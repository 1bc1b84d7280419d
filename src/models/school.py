# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School API models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PositiveInt

from src.infrastructure.database.models.school import (
    Curriculum,
    EducationLevel,
    SchoolStatus,
    SchoolType,
)
from src.models.common import RequestModel, SchoolSummary, UserSummary


class SchoolCreateRequest(RequestModel):
    """Request to create a school.

    When school_manager_id is omitted a manager account is created from the
    manager_* fields, falling back to the school email and name.
    """

    school_unique_id: str = Field(..., min_length=1, max_length=50)
    school_name: str = Field(..., min_length=1, max_length=255)
    school_address: str = Field(..., min_length=1, max_length=500)
    school_email: EmailStr
    school_type: SchoolType
    school_phone: str | None = Field(None, max_length=30)
    school_region: str | None = Field(None, max_length=100)
    school_city: str | None = Field(None, max_length=100)
    school_district: str | None = Field(None, max_length=100)
    education_level: EducationLevel | None = None
    curriculum: Curriculum | None = None
    status: SchoolStatus = SchoolStatus.ACTIVE
    school_lat: float | None = Field(None, ge=-90, le=90)
    school_long: float | None = Field(None, ge=-180, le=180)
    school_logo: str | None = Field(None, max_length=500)
    school_manager_id: PositiveInt | None = None
    manager_email: EmailStr | None = None
    manager_first_name: str | None = Field(None, min_length=1, max_length=100)
    manager_last_name: str | None = Field(None, min_length=1, max_length=100)


class SchoolUpdateRequest(RequestModel):
    """Partial school update. Only fields present in the request are written."""

    school_unique_id: str | None = Field(None, min_length=1, max_length=50)
    school_name: str | None = Field(None, min_length=1, max_length=255)
    school_address: str | None = Field(None, min_length=1, max_length=500)
    school_email: EmailStr | None = None
    school_type: SchoolType | None = None
    school_phone: str | None = Field(None, max_length=30)
    school_region: str | None = Field(None, max_length=100)
    school_city: str | None = Field(None, max_length=100)
    school_district: str | None = Field(None, max_length=100)
    education_level: EducationLevel | None = None
    curriculum: Curriculum | None = None
    status: SchoolStatus | None = None
    school_lat: float | None = Field(None, ge=-90, le=90)
    school_long: float | None = Field(None, ge=-180, le=180)
    school_logo: str | None = Field(None, max_length=500)


class SchoolResponse(BaseModel):
    """School details with its manager."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    school_unique_id: str
    school_name: str
    school_address: str
    school_email: str
    school_phone: str | None = None
    school_region: str | None = None
    school_city: str | None = None
    school_district: str | None = None
    school_type: str
    education_level: str | None = None
    curriculum: str | None = None
    status: str
    school_lat: float | None = None
    school_long: float | None = None
    school_logo: str | None = None
    school_manager_id: int
    manager: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


class SchoolUsersByRole(BaseModel):
    """Users of a school grouped by role."""

    school: SchoolSummary
    teachers: list[UserSummary] = Field(default_factory=list)
    students: list[UserSummary] = Field(default_factory=list)
    parents: list[UserSummary] = Field(default_factory=list)
    managers: list[UserSummary] = Field(default_factory=list)
