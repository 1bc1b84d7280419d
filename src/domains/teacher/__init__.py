# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher domain package.

This package provides teacher management functionality:
- TeacherService: registration, class assignment, updates and reads
- Exceptions: teacher-related error types
"""

from src.domains.teacher.service import (
    ClassSchoolMismatchError,
    InvalidClassesError,
    NotATeacherError,
    SchoolNotFoundError,
    TeacherExistsError,
    TeacherNotFoundError,
    TeacherService,
    TeacherServiceError,
    normalize_phone,
)

__all__ = [
    "ClassSchoolMismatchError",
    "InvalidClassesError",
    "NotATeacherError",
    "SchoolNotFoundError",
    "TeacherExistsError",
    "TeacherNotFoundError",
    "TeacherService",
    "TeacherServiceError",
    "normalize_phone",
]
