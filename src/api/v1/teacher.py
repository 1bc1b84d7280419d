# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher management API endpoints.

This module provides endpoints for teacher management:
- POST /register - Register a teacher in a school
- POST /assign-classes - Link a teacher to classes
- GET "" - List teachers
- GET /school/{school_id} - Teachers of a school
- GET /{teacher_id} - Get teacher details
- PUT /{teacher_id} - Update teacher account and profile
- DELETE /{teacher_id} - Delete teacher

Registered teachers receive a generated password by email and stay
unverified until an admin verifies them.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_notifier, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.teacher.service import TeacherService
from src.infrastructure.notifications import NotificationDispatcher
from src.models.common import ApiResponse
from src.models.teacher import AssignClassesRequest, TeacherRegisterRequest, TeacherUpdateRequest
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_teacher_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> TeacherService:
    return TeacherService(db=db, notifier=notifier)


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register teacher",
)
async def register_teacher(
    data: TeacherRegisterRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    logger.info("Registering teacher: school=%s, by=%s", data.school_id, current_user.id)
    teacher = await service.register_teacher(data)
    return success("Teacher registered successfully.", teacher)


@router.post(
    "/assign-classes",
    response_model=ApiResponse[UserResponse],
    summary="Assign classes to teacher",
)
async def assign_classes(
    data: AssignClassesRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    teacher = await service.assign_teacher_to_classes(data.teacher_id, data.class_ids)
    return success("Classes assigned to teacher successfully.", teacher)


@router.get(
    "",
    response_model=ApiResponse[list[UserResponse]],
    summary="List teachers",
)
async def get_all_teachers(
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    teachers = await service.get_all_teachers()
    return success("Teachers retrieved successfully.", teachers)


@router.get(
    "/school/{school_id}",
    response_model=ApiResponse[list[UserResponse]],
    summary="Teachers of a school",
)
async def get_teachers_by_school(
    school_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    teachers = await service.get_teachers_by_school(school_id)
    return success("Teachers retrieved successfully.", teachers)


@router.get(
    "/{teacher_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get teacher",
)
async def get_teacher(
    teacher_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    teacher = await service.get_teacher_by_id(teacher_id)
    return success("Teacher retrieved successfully.", teacher)


@router.put(
    "/{teacher_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update teacher",
)
async def update_teacher(
    teacher_id: int,
    data: TeacherUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    teacher = await service.update_teacher(teacher_id, data)
    return success("Teacher updated successfully.", teacher)


@router.delete(
    "/{teacher_id}",
    response_model=ApiResponse[None],
    summary="Delete teacher",
)
async def delete_teacher(
    teacher_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: TeacherService = Depends(_get_teacher_service),
) -> ApiResponse:
    logger.info("Deleting teacher %s, by=%s", teacher_id, current_user.id)
    await service.delete_teacher(teacher_id)
    return success("Teacher deleted successfully.")
