# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for user authentication:
- POST /register - Self-service registration with role IDs
- POST /login - Email and password login, returns an access token
- POST /forgot-password - Email a password reset link
- POST /reset-password - Set a new password with a reset token

All four endpoints are public and rate limited per client IP.

Example:
    POST /api/v1/auth/login
    {
        "email": "jane@example.com",
        "password": "secret1"
    }
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_jwt_manager, get_notifier
from src.api.middleware.rate_limit import RATE_LIMIT_AUTH, get_ip_only, limiter
from src.api.responses import success
from src.domains.auth.jwt import JWTManager
from src.domains.auth.service import AuthService
from src.infrastructure.notifications import NotificationDispatcher
from src.models.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from src.models.common import ApiResponse
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> AuthService:
    return AuthService(db=db, jwt_manager=jwt_manager, notifier=notifier)


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def register(
    request: Request,
    data: RegisterRequest,
    service: AuthService = Depends(_get_auth_service),
) -> ApiResponse:
    """Register a user. The account stays unverified until an admin verifies it."""
    user = await service.register(data)
    return success("User registered successfully.", user)


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Login",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def login(
    request: Request,
    data: LoginRequest,
    service: AuthService = Depends(_get_auth_service),
) -> ApiResponse:
    """Authenticate with email and password."""
    result = await service.login(str(data.email), data.password)
    return success("Login successful.", result)


@router.post(
    "/forgot-password",
    response_model=ApiResponse[None],
    summary="Request password reset",
    description="Always answers success so account existence is not revealed.",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    service: AuthService = Depends(_get_auth_service),
) -> ApiResponse:
    await service.request_password_reset(str(data.email))
    return success("If the email is registered, a reset link has been sent.")


@router.post(
    "/reset-password",
    response_model=ApiResponse[None],
    summary="Reset password",
)
@limiter.limit(RATE_LIMIT_AUTH, key_func=get_ip_only)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    service: AuthService = Depends(_get_auth_service),
) -> ApiResponse:
    await service.reset_password(data.token, data.new_password)
    return success("Password has been reset successfully.")
