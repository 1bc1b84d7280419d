# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for user reads and self-service updates.

This module provides the UserService that handles:
- User listing and lookup by user or profile ID
- Verification flag toggling
- Combined user and profile updates

Example:
    >>> user_service = UserService(db_session)
    >>> user = await user_service.verify_user_by_id(user_id)
    >>> users = await user_service.get_all_users()
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ConflictError, DomainError, NotFoundError
from src.domains.user.accounts import (
    format_user,
    load_user,
    phone_taken,
    upsert_profile,
    user_load_options,
)
from src.infrastructure.database.models import User, UserProfile
from src.models.user import UserProfileUpdateRequest, UserResponse

logger = logging.getLogger(__name__)


class UserServiceError(DomainError):
    """Base exception for user service errors."""

    pass


class UserNotFoundError(UserServiceError, NotFoundError):
    """Raised when a user is not found."""

    pass


class PhoneInUseError(UserServiceError, ConflictError):
    """Raised when a phone number belongs to another user."""

    pass


class UserService:
    """Service for reading and updating users.

    Attributes:
        _db: Async database session.
    """

    format_user = staticmethod(format_user)

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the user service.

        Args:
            db: Async database session.
        """
        self._db = db

    async def get_all_users(self) -> list[UserResponse]:
        """List all users in their API shape."""
        stmt = (
            select(User)
            .options(*user_load_options())
            .order_by(User.id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return [format_user(user) for user in result.scalars().all()]

    async def get_user_by_id(self, user_id: int) -> UserResponse:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist.
        """
        return format_user(await self._get_user(user_id))

    async def get_user_by_profile_id(self, profile_id: int) -> UserResponse:
        """Get the owner of a profile.

        Raises:
            UserNotFoundError: If no user owns the profile.
        """
        result = await self._db.execute(
            select(UserProfile.user_id).where(UserProfile.id == profile_id)
        )
        user_id = result.scalar_one_or_none()
        if user_id is None:
            raise UserNotFoundError("User not found.")
        return await self.get_user_by_id(user_id)

    async def verify_user_by_id(self, user_id: int, is_verified: bool = True) -> UserResponse:
        """Set or clear the verification flag.

        Raises:
            UserNotFoundError: If user doesn't exist.
        """
        user = await self._db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found.")

        user.is_verified = is_verified
        await self._db.commit()

        logger.info("User %s verification set to %s", user_id, is_verified)
        return await self.get_user_by_id(user_id)

    async def update_user_profile(
        self,
        user_id: int,
        request: UserProfileUpdateRequest,
    ) -> UserResponse:
        """Update user names and phone, and upsert the provided profile fields.

        Raises:
            UserNotFoundError: If user doesn't exist.
            PhoneInUseError: If the phone belongs to another user.
        """
        user = await self._db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found.")

        update_data = request.model_dump(exclude_unset=True)
        phone = update_data.get("phone")
        if phone and await phone_taken(self._db, phone, exclude_user_id=user_id):
            raise PhoneInUseError("Phone number is already in use by another user.")

        profile_values = request.profile_values()

        try:
            for field in ("first_name", "last_name"):
                if update_data.get(field) is not None:
                    setattr(user, field, update_data[field])
            if "phone" in update_data:
                user.phone = phone or None
            if profile_values:
                await upsert_profile(self._db, user_id, profile_values)
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise PhoneInUseError("Phone number is already in use by another user.") from e
        except Exception:
            await self._db.rollback()
            raise

        logger.info("User profile updated: %s (fields=%s)", user_id, sorted(update_data))
        return await self.get_user_by_id(user_id)

    async def _get_user(self, user_id: int) -> User:
        user = await load_user(self._db, user_id)
        if not user:
            raise UserNotFoundError("User not found.")
        return user
