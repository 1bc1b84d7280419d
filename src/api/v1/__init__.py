# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Registration, login and password reset endpoints.
    schools: School management endpoints.
    classes: Class management and teacher assignment endpoints.
    students: Student management, activation and parent linking endpoints.
    teacher: Teacher registration and class assignment endpoints.
    roles: Role listing and management endpoints.
    users: User reads, verification and profile updates.
"""

from fastapi import APIRouter

from src.api.v1 import auth, classes, roles, schools, students, teacher, users

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(schools.router, prefix="/schools", tags=["Schools"])
router.include_router(classes.router, prefix="/classes", tags=["Classes"])
router.include_router(students.router, prefix="/student", tags=["Students"])
router.include_router(teacher.router, prefix="/teacher", tags=["Teacher"])
router.include_router(roles.router, prefix="/roles", tags=["Roles"])

__all__ = ["router"]
