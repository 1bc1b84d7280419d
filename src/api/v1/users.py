# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User API endpoints.

This module provides endpoints for user reads and updates:
- GET /get-all-users - List users
- GET /profile/{profile_id} - Get the owner of a profile
- GET /{user_id} - Get user details
- PATCH /{user_id}/verify - Set or clear the verification flag (admin)
- PUT /{user_id}/profile - Update names, phone and profile fields

Users may update their own profile; admins may update any.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.user.service import UserService
from src.models.common import ApiResponse
from src.models.user import UserProfileUpdateRequest, UserResponse, VerifyUserRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db=db)


@router.get(
    "/get-all-users",
    response_model=ApiResponse[list[UserResponse]],
    summary="List users",
)
async def get_all_users(
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(_get_user_service),
) -> ApiResponse:
    users = await service.get_all_users()
    return success("Users retrieved successfully.", users)


@router.get(
    "/profile/{profile_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get user by profile",
)
async def get_user_by_profile(
    profile_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(_get_user_service),
) -> ApiResponse:
    user = await service.get_user_by_profile_id(profile_id)
    return success("User retrieved successfully.", user)


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Get user",
)
async def get_user(
    user_id: int,
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(_get_user_service),
) -> ApiResponse:
    user = await service.get_user_by_id(user_id)
    return success("User retrieved successfully.", user)


@router.patch(
    "/{user_id}/verify",
    response_model=ApiResponse[UserResponse],
    summary="Verify user",
)
async def verify_user(
    user_id: int,
    data: VerifyUserRequest | None = None,
    current_user: CurrentUser = Depends(require_admin),
    service: UserService = Depends(_get_user_service),
) -> ApiResponse:
    is_verified = data.is_verified if data else True
    logger.info("Setting user %s verified=%s, by=%s", user_id, is_verified, current_user.id)
    user = await service.verify_user_by_id(user_id, is_verified)
    return success("User verification updated successfully.", user)


@router.put(
    "/{user_id}/profile",
    response_model=ApiResponse[UserResponse],
    summary="Update user profile",
)
async def update_user_profile(
    user_id: int,
    data: UserProfileUpdateRequest,
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(_get_user_service),
) -> ApiResponse:
    """Update a user's names, phone and profile.

    Raises:
        HTTPException: If a non-admin updates another user.
    """
    if not current_user.is_admin and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own profile",
        )
    user = await service.update_user_profile(user_id, data)
    return success("User profile updated successfully.", user)
