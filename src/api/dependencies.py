# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated and verified users
- Get shared infrastructure (JWT manager, notification dispatcher)

Example:
    @router.get("/all")
    async def list_students(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_auth),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import CurrentUser, get_current_user
from src.core.config import get_settings
from src.domains.auth.jwt import JWTManager
from src.infrastructure.database.connection import get_sessionmaker
from src.infrastructure.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Services commit their own units of work; anything left pending when
    the request ends is discarded when the session closes.

    Yields:
        AsyncSession for the application database.
    """
    async with get_sessionmaker()() as session:
        yield session


def get_jwt_manager() -> JWTManager:
    """Get a JWT manager configured from settings."""
    return JWTManager(get_settings().jwt)


def get_notifier() -> NotificationDispatcher:
    """Get the notification dispatcher used by services."""
    return NotificationDispatcher()


# =========================================================================
# Authentication Dependencies
# =========================================================================


def get_optional_user(request: Request) -> CurrentUser | None:
    """Get current user if authenticated, None otherwise."""
    return get_current_user(request)


def require_auth(request: Request) -> CurrentUser:
    """Require an authenticated, verified user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: 401 if not authenticated, 403 if the account is
            not verified yet.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is not verified",
        )
    return user


def require_admin(request: Request) -> CurrentUser:
    """Require a verified user holding the admin role.

    Raises:
        HTTPException: If not authenticated, not verified or not admin.
    """
    user = require_auth(request)
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


class RequireRole:
    """Dependency for requiring any of the given roles.

    Example:
        @router.get("/manager/{user_id}/users")
        async def school_users(
            user: CurrentUser = Depends(RequireRole("admin", "school_manager")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted role names (any of these).
        """
        self.roles = roles

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: If missing required roles.
        """
        user = require_auth(request)

        if not user.has_any_role(*self.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(self.roles)}",
            )

        return user
