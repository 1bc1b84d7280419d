# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain package.

This package provides student management functionality including:
- Student creation and updates with enrollments and parents
- Cascading deletion with orphaned parent cleanup
- Activation and medical condition reports
"""

from src.domains.student.service import (
    InvalidClassesError,
    InvalidParentsError,
    NewParentAccount,
    SchoolNotFoundError,
    StudentExistsError,
    StudentNotFoundError,
    StudentService,
    StudentServiceError,
)

__all__ = [
    "InvalidClassesError",
    "InvalidParentsError",
    "NewParentAccount",
    "SchoolNotFoundError",
    "StudentExistsError",
    "StudentNotFoundError",
    "StudentService",
    "StudentServiceError",
]
