# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class API models."""

import re
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, PositiveInt, field_validator, model_validator

from src.infrastructure.database.models.class_ import ClassStatus
from src.models.common import RequestModel, SchoolSummary, StudentSummary, UserSummary

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME_RANGE_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d-([01]\d|2[0-3]):[0-5]\d$")


def validate_schedule(schedule: dict[str, str] | None) -> dict[str, str] | None:
    """Normalize a day -> "HH:MM-HH:MM" map.

    Day names are lowercased. Empty values mean "no session that day" and are
    kept as empty strings.

    Raises:
        ValueError: On unknown day names or malformed time ranges.
    """
    if schedule is None:
        return None

    normalized: dict[str, str] = {}
    for day, time_range in schedule.items():
        key = day.strip().lower()
        if key not in WEEKDAYS:
            raise ValueError(f"Unknown schedule day '{day}'")
        value = (time_range or "").strip()
        if value and not TIME_RANGE_PATTERN.match(value):
            raise ValueError(f"Invalid time range '{time_range}' for {key}, expected HH:MM-HH:MM")
        normalized[key] = value
    return normalized


def days_from_schedule(schedule: dict[str, str] | None) -> list[str]:
    """Days of the schedule that have a non-empty time range."""
    if not schedule:
        return []
    return [day for day, time_range in schedule.items() if time_range]


class _ClassFields(RequestModel):
    @field_validator("schedule", mode="after", check_fields=False)
    @classmethod
    def _check_schedule(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        return validate_schedule(value)

    @model_validator(mode="after")
    def _check_dates(self) -> Self:
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start and end and end < start:
            raise ValueError("end_date must not be before start_date")
        return self


class ClassCreateRequest(_ClassFields):
    """Request to create a class, optionally with a teacher and students."""

    code: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    grade_level: str = Field(..., min_length=1, max_length=50)
    subject: str | None = Field(None, max_length=100)
    semester: str | None = Field(None, max_length=50)
    academic_year: str | None = Field(None, max_length=20)
    teaching_method: str | None = Field(None, max_length=50)
    capacity: PositiveInt = 30
    max_students: PositiveInt = 30
    room_number: str | None = Field(None, max_length=50)
    class_logo: str | None = Field(None, max_length=500)
    status: ClassStatus = ClassStatus.ACTIVE
    schedule: dict[str, str] = Field(default_factory=dict)
    credits: int | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    school_id: PositiveInt
    teacher_id: PositiveInt | None = None
    student_ids: list[PositiveInt] = Field(default_factory=list)


class ClassUpdateRequest(_ClassFields):
    """Partial class update. Only fields present in the request are written."""

    code: str | None = Field(None, min_length=3, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=255)
    grade_level: str | None = Field(None, min_length=1, max_length=50)
    subject: str | None = Field(None, max_length=100)
    semester: str | None = Field(None, max_length=50)
    academic_year: str | None = Field(None, max_length=20)
    teaching_method: str | None = Field(None, max_length=50)
    capacity: PositiveInt | None = None
    max_students: PositiveInt | None = None
    room_number: str | None = Field(None, max_length=50)
    class_logo: str | None = Field(None, max_length=500)
    status: ClassStatus | None = None
    schedule: dict[str, str] | None = None
    credits: int | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    school_id: PositiveInt | None = None


class AssignTeacherRequest(RequestModel):
    class_id: PositiveInt
    teacher_id: PositiveInt


class ClassResponse(BaseModel):
    """Class details with school, teachers and enrolled students."""

    id: int
    code: str
    name: str
    grade_level: str
    subject: str | None = None
    semester: str | None = None
    academic_year: str | None = None
    teaching_method: str | None = None
    capacity: int
    max_students: int
    room_number: str | None = None
    class_logo: str | None = None
    status: str
    days_of_week: list[str] = Field(default_factory=list)
    schedule: dict[str, str] | None = None
    credits: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    school_id: int
    school: SchoolSummary | None = None
    teachers: list[UserSummary] = Field(default_factory=list)
    students: list[StudentSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
