# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain package.

This package provides class management functionality including:
- Class CRUD operations
- Teacher assignment
- Student enrollment on creation
"""

from src.domains.class_.service import (
    ClassCodeExistsError,
    ClassNotFoundError,
    ClassService,
    ClassServiceError,
    InvalidStudentsError,
    SchoolNotFoundError,
    TeacherNotFoundError,
)

__all__ = [
    "ClassCodeExistsError",
    "ClassNotFoundError",
    "ClassService",
    "ClassServiceError",
    "InvalidStudentsError",
    "SchoolNotFoundError",
    "TeacherNotFoundError",
]
