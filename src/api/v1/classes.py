# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class management API endpoints.

This module provides endpoints for class management:
- POST /create-new-class - Create a class with teacher and enrolled students
- POST /assign-teacher - Link a teacher to a class
- GET "" - List classes
- GET /school/{school_id} - List classes of a school
- GET /{class_id} - Get class details
- PUT /{class_id} - Update class
- DELETE /{class_id} - Delete class with its links

Example:
    POST /api/v1/classes/create-new-class
    {
        "code": "MATH101",
        "name": "Mathematics",
        "gradeLevel": "10",
        "schoolId": 1,
        "schedule": {"monday": "08:00-09:00", "tuesday": ""}
    }
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.class_.service import ClassService
from src.models.class_ import (
    AssignTeacherRequest,
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
)
from src.models.common import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_class_service(db: AsyncSession = Depends(get_db)) -> ClassService:
    return ClassService(db=db)


@router.post(
    "/create-new-class",
    response_model=ApiResponse[ClassResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
)
async def create_class(
    data: ClassCreateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    logger.info("Creating class: code=%s, school=%s, by=%s", data.code, data.school_id, current_user.id)
    class_ = await service.create_class(data)
    return success("Class created successfully.", class_)


@router.post(
    "/assign-teacher",
    response_model=ApiResponse[ClassResponse],
    summary="Assign teacher to class",
)
async def assign_teacher(
    data: AssignTeacherRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    class_ = await service.assign_teacher_to_class(data.class_id, data.teacher_id)
    return success("Teacher assigned to class successfully.", class_)


@router.get(
    "",
    response_model=ApiResponse[list[ClassResponse]],
    summary="List classes",
)
async def get_all_classes(
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    classes = await service.get_all_classes()
    return success("Classes retrieved successfully.", classes)


@router.get(
    "/school/{school_id}",
    response_model=ApiResponse[list[ClassResponse]],
    summary="List classes of a school",
)
async def get_classes_by_school(
    school_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    classes = await service.get_classes_by_school_id(school_id)
    return success("Classes retrieved successfully.", classes)


@router.get(
    "/{class_id}",
    response_model=ApiResponse[ClassResponse],
    summary="Get class",
)
async def get_class(
    class_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    class_ = await service.get_class_by_id(class_id)
    return success("Class retrieved successfully.", class_)


@router.put(
    "/{class_id}",
    response_model=ApiResponse[ClassResponse],
    summary="Update class",
)
async def update_class(
    class_id: int,
    data: ClassUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    class_ = await service.update_class(class_id, data)
    return success("Class updated successfully.", class_)


@router.delete(
    "/{class_id}",
    response_model=ApiResponse[None],
    summary="Delete class",
)
async def delete_class(
    class_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: ClassService = Depends(_get_class_service),
) -> ApiResponse:
    logger.info("Deleting class %s, by=%s", class_id, current_user.id)
    await service.delete_class(class_id)
    return success("Class deleted successfully.")
