# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models: response envelope, request base and entity summaries.

Request models accept both snake_case and camelCase keys, so
``{"schoolId": 1}`` and ``{"school_id": 1}`` are equivalent. Responses are
always snake_case.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class RequestModel(BaseModel):
    """Base class for request bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope returned by every endpoint.

    Attributes:
        status: Always "success".
        message: Human-readable outcome.
        data: Payload, omitted for operations without a result.
    """

    status: Literal["success"] = "success"
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope returned by every endpoint."""

    status: Literal["error"] = "error"
    message: str


class UserSummary(BaseModel):
    """Minimal user reference."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    status: str | None = None


class SchoolSummary(BaseModel):
    """Minimal school reference."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    school_unique_id: str
    school_name: str
    school_email: str | None = None
    status: str | None = None


class ClassSummary(BaseModel):
    """Minimal class reference."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    grade_level: str | None = None
    school_id: int | None = None


class StudentSummary(BaseModel):
    """Minimal student reference with the owning user's name."""

    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    grade: str
    section: str
    student_no: str


class ParentSummary(BaseModel):
    """Parent reference with the owning user's contact details."""

    id: int = Field(description="Parent record id")
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None

