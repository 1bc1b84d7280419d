# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request builders shared by unit and integration tests."""

from src.models.class_ import ClassCreateRequest
from src.models.school import SchoolCreateRequest
from src.models.student import StudentCreateRequest


def school_payload(**overrides) -> dict:
    data = {
        "school_unique_id": "SCH-1",
        "school_name": "Riyadh-1",
        "school_address": "King Fahd Rd, Riyadh",
        "school_email": "office@riyadh1.com",
        "school_type": "PUBLIC",
    }
    data.update(overrides)
    return data


def class_payload(school_id: int, **overrides) -> dict:
    data = {
        "code": "MATH101",
        "name": "Mathematics",
        "grade_level": "10",
        "school_id": school_id,
        "schedule": {"monday": "08:00-09:00", "tuesday": ""},
    }
    data.update(overrides)
    return data


def student_payload(school_id: int, **overrides) -> dict:
    data = {
        "first_name": "Sara",
        "last_name": "Ali",
        "email": "sara@students.com",
        "school_id": school_id,
        "grade": "5",
        "section": "A",
        "student_no": "S-0001",
    }
    data.update(overrides)
    return data


def school_request(**overrides) -> SchoolCreateRequest:
    return SchoolCreateRequest(**school_payload(**overrides))


def class_request(school_id: int, **overrides) -> ClassCreateRequest:
    return ClassCreateRequest(**class_payload(school_id, **overrides))


def student_request(school_id: int, **overrides) -> StudentCreateRequest:
    return StudentCreateRequest(**student_payload(school_id, **overrides))
