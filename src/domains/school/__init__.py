# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School domain package.

This package provides school management functionality including:
- School CRUD operations
- Manager account provisioning and cleanup
- School users grouped by role
"""

from src.domains.school.service import (
    ManagerEmailExistsError,
    SchoolAccessError,
    SchoolExistsError,
    SchoolHasDependentsError,
    SchoolManagerNotFoundError,
    SchoolNotFoundError,
    SchoolService,
    SchoolServiceError,
)

__all__ = [
    "ManagerEmailExistsError",
    "SchoolAccessError",
    "SchoolExistsError",
    "SchoolHasDependentsError",
    "SchoolManagerNotFoundError",
    "SchoolNotFoundError",
    "SchoolService",
    "SchoolServiceError",
]
