# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student management API endpoints.

This module provides endpoints for student management:
- GET /all - List students
- GET /medical-conditions - Students with health notes
- GET /school/{school_id} - Students of a school
- GET /class/{class_id} - Students enrolled in a class
- GET /{student_id} - Get student details
- POST "" - Create a student with classes and parents
- PUT /{user_id} - Update a student by its user ID
- DELETE /{student_id} - Delete a student
- PATCH /{student_id}/activate - Activate the student's account
- PATCH /{student_id}/deactivate - Deactivate the student's account
- PUT /{student_id}/parents - Replace the student's parents

Example:
    POST /api/v1/student
    {
        "firstName": "Sara",
        "lastName": "Ali",
        "email": "sara@example.com",
        "schoolId": 1,
        "grade": "5",
        "section": "A",
        "studentNo": "S-0001",
        "parentInfo": [{"firstName": "Omar", "lastName": "Ali", "email": "omar@example.com"}]
    }
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_notifier, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.student.service import StudentService
from src.infrastructure.notifications import NotificationDispatcher
from src.models.common import ApiResponse
from src.models.student import (
    ConnectParentsRequest,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_student_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> StudentService:
    return StudentService(db=db, notifier=notifier)


@router.get(
    "/all",
    response_model=ApiResponse[list[StudentResponse]],
    summary="List students",
)
async def get_all_students(
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    students = await service.get_all_students()
    return success("Students retrieved successfully.", students)


@router.get(
    "/medical-conditions",
    response_model=ApiResponse[list[StudentResponse]],
    summary="Students with medical conditions",
)
async def get_students_with_medical_conditions(
    school_id: int | None = Query(None, alias="schoolId"),
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    students = await service.get_students_with_medical_conditions(school_id)
    return success("Students with medical conditions retrieved successfully.", students)


@router.get(
    "/school/{school_id}",
    response_model=ApiResponse[list[StudentResponse]],
    summary="Students of a school",
)
async def get_students_by_school(
    school_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    students = await service.get_students_by_school_id(school_id)
    return success("Students retrieved successfully.", students)


@router.get(
    "/class/{class_id}",
    response_model=ApiResponse[list[StudentResponse]],
    summary="Students of a class",
)
async def get_students_by_class(
    class_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    students = await service.get_students_by_class_id(class_id)
    return success("Students retrieved successfully.", students)


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Get student",
)
async def get_student(
    student_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    student = await service.get_student_by_id(student_id)
    return success("Student retrieved successfully.", student)


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
    description="Create a student account with classes and parents. "
    "New parent accounts receive their credentials by email.",
)
async def create_student(
    data: StudentCreateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    logger.info("Creating student: school=%s, by=%s", data.school_id, current_user.id)
    student = await service.create_student(data)
    return success("Student created successfully.", student)


@router.put(
    "/{user_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Update student",
    description="Update a student addressed by the ID of its user account.",
)
async def update_student(
    user_id: int,
    data: StudentUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    student = await service.update_student(user_id, data)
    return success("Student updated successfully.", student)


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[None],
    summary="Delete student",
)
async def delete_student(
    student_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    logger.info("Deleting student %s, by=%s", student_id, current_user.id)
    await service.delete_student(student_id)
    return success("Student deleted successfully.")


@router.patch(
    "/{student_id}/activate",
    response_model=ApiResponse[StudentResponse],
    summary="Activate student",
)
async def activate_student(
    student_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    student = await service.activate_student(student_id)
    return success("Student activated successfully.", student)


@router.patch(
    "/{student_id}/deactivate",
    response_model=ApiResponse[StudentResponse],
    summary="Deactivate student",
)
async def deactivate_student(
    student_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    student = await service.deactivate_student(student_id)
    return success("Student deactivated successfully.", student)


@router.put(
    "/{student_id}/parents",
    response_model=ApiResponse[StudentResponse],
    summary="Connect parents",
    description="Make the given users exactly the student's parents.",
)
async def connect_parents(
    student_id: int,
    data: ConnectParentsRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: StudentService = Depends(_get_student_service),
) -> ApiResponse:
    student = await service.connect_student_with_parents(student_id, data.parent_user_ids)
    return success("Student parents updated successfully.", student)
