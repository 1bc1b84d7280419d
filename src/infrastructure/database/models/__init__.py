# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata.
"""

from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.class_ import Class, ClassStatus, ClassTeacher
from src.infrastructure.database.models.school import (
    Curriculum,
    EducationLevel,
    Employee,
    School,
    SchoolAdmin,
    SchoolStatus,
    SchoolType,
)
from src.infrastructure.database.models.student import (
    Parent,
    ParentStudent,
    Student,
    StudentClass,
)
from src.infrastructure.database.models.user import (
    PasswordResetToken,
    Role,
    RoleName,
    User,
    UserProfile,
    UserRole,
    UserSchool,
    UserStatus,
)

__all__ = [
    "Base",
    # Users
    "User",
    "UserProfile",
    "UserRole",
    "UserSchool",
    "UserStatus",
    "Role",
    "RoleName",
    "PasswordResetToken",
    # Schools
    "School",
    "SchoolAdmin",
    "SchoolStatus",
    "SchoolType",
    "EducationLevel",
    "Curriculum",
    "Employee",
    # Classes
    "Class",
    "ClassStatus",
    "ClassTeacher",
    # Students
    "Student",
    "StudentClass",
    "Parent",
    "ParentStudent",
]
