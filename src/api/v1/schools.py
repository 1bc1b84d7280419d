# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School management API endpoints.

This module provides endpoints for school management:
- POST /create-new-school - Create a school with its manager
- GET /get-all-schools - List schools
- GET /{school_id} - Get school details
- PUT /{school_id} - Update school
- DELETE /{school_id} - Delete school and its manager account
- GET /{school_id}/users - List users linked to a school
- GET /manager/{user_id}/users - A manager's school users grouped by role

Creating, updating and deleting schools requires the admin role. School
managers may only read the grouped users of their own school.

Example:
    POST /api/v1/schools/create-new-school
    {
        "schoolUniqueId": "SCH-1",
        "schoolName": "Riyadh-1",
        "schoolAddress": "King Fahd Rd",
        "schoolEmail": "office@riyadh1.example",
        "schoolType": "PUBLIC"
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import RequireRole, get_db, get_notifier, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.school.service import SchoolService
from src.infrastructure.database.models import RoleName
from src.infrastructure.notifications import NotificationDispatcher
from src.models.common import ApiResponse
from src.models.school import (
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
    SchoolUsersByRole,
)
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_school_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> SchoolService:
    """Get school service instance.

    Args:
        db: Database session.
        notifier: Dispatcher for the manager welcome email.

    Returns:
        Configured SchoolService instance.
    """
    return SchoolService(db=db, notifier=notifier)


@router.post(
    "/create-new-school",
    response_model=ApiResponse[SchoolResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create school",
    description="Create a school and link or create its manager. Requires admin access.",
)
async def create_school(
    data: SchoolCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    logger.info(
        "Creating school: unique_id=%s, name=%s, by=%s",
        data.school_unique_id,
        data.school_name,
        current_user.id,
    )
    school = await service.create_school(data)
    return success("School created successfully.", school)


@router.get(
    "/get-all-schools",
    response_model=ApiResponse[list[SchoolResponse]],
    summary="List schools",
)
async def get_all_schools(
    current_user: CurrentUser = Depends(require_auth),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    schools = await service.get_all_schools()
    return success("Schools retrieved successfully.", schools)


@router.get(
    "/manager/{user_id}/users",
    response_model=ApiResponse[SchoolUsersByRole],
    summary="Users of a manager's school",
    description="Teachers, students, parents and managers of the school the user manages.",
)
async def get_school_users_by_role(
    user_id: int,
    current_user: CurrentUser = Depends(
        RequireRole(RoleName.ADMIN.value, RoleName.SCHOOL_MANAGER.value)
    ),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    """Get the users of the school managed by ``user_id``.

    Raises:
        HTTPException: If a non-admin asks for another manager's school.
    """
    if not current_user.is_admin and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view the users of your own school",
        )
    users = await service.get_school_users_by_role(user_id)
    return success("School users retrieved successfully.", users)


@router.get(
    "/{school_id}",
    response_model=ApiResponse[SchoolResponse],
    summary="Get school",
)
async def get_school(
    school_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    school = await service.get_school_by_id(school_id)
    return success("School retrieved successfully.", school)


@router.put(
    "/{school_id}",
    response_model=ApiResponse[SchoolResponse],
    summary="Update school",
)
async def update_school(
    school_id: int,
    data: SchoolUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    school = await service.update_school(school_id, data)
    return success("School updated successfully.", school)


@router.delete(
    "/{school_id}",
    response_model=ApiResponse[None],
    summary="Delete school",
    description="Fails while classes or students still reference the school.",
)
async def delete_school(
    school_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    logger.info("Deleting school %s, by=%s", school_id, current_user.id)
    await service.delete_school(school_id)
    return success("School deleted successfully.")


@router.get(
    "/{school_id}/users",
    response_model=ApiResponse[list[UserResponse]],
    summary="Users of a school",
)
async def get_school_users(
    school_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: SchoolService = Depends(_get_school_service),
) -> ApiResponse:
    users = await service.get_all_users_by_school_id(school_id)
    return success("School users retrieved successfully.", users)
