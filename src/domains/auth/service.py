# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for accounts and credentials.

This module provides the main AuthService that orchestrates:
- Self-service registration
- Login with access token issuance
- Password reset via single-use emailed tokens

Example:
    >>> auth_service = AuthService(db_session, jwt_manager)
    >>> result = await auth_service.login("jane@example.com", "secret")
    >>> result.access_token
"""

import logging
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.core.exceptions import AuthenticationError, ConflictError, DomainError, ValidationError
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import hash_password, verify_password
from src.domains.user.accounts import (
    create_account,
    format_user,
    get_user_by_email,
    load_user,
    phone_taken,
)
from src.infrastructure.database.models import PasswordResetToken, Role, User, UserStatus
from src.infrastructure.notifications import NotificationDispatcher
from src.infrastructure.notifications.templates import (
    password_reset_done_email,
    password_reset_email,
)
from src.models.auth import LoginResponse, RegisterRequest
from src.models.user import UserResponse
from src.utils.datetime import is_expired, minutes_from_now

logger = logging.getLogger(__name__)


class AuthServiceError(DomainError):
    """Base exception for authentication service errors."""

    pass


class InvalidCredentialsError(AuthServiceError, AuthenticationError):
    """Raised when email or password is wrong."""

    pass


class AccountInactiveError(AuthServiceError, AuthenticationError):
    """Raised when account is not active."""

    pass


class EmailExistsError(AuthServiceError, ConflictError):
    """Raised when registering an email that is taken."""

    pass


class InvalidRolesError(AuthServiceError, ValidationError):
    """Raised when some role IDs do not exist."""

    pass


class InvalidResetTokenError(AuthServiceError, ValidationError):
    """Raised when a reset token is unknown or expired."""

    pass


class AuthService:
    """Authentication service for registration, login and password resets.

    Attributes:
        _db: Database session for queries.
        _jwt_manager: JWT token manager.
        _settings: Application settings.
        _notifier: Dispatcher used for reset emails.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        settings: Settings | None = None,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Async database session.
            jwt_manager: JWT token manager.
            settings: Application settings. Defaults to the cached settings.
            notifier: Notification dispatcher. Defaults to a queue-backed one.
        """
        self._db = db
        self._jwt_manager = jwt_manager
        self._settings = settings or get_settings()
        self._notifier = notifier or NotificationDispatcher()

    async def register(self, request: RegisterRequest) -> UserResponse:
        """Register a user with the given roles.

        The account is active but unverified until an admin verifies it.

        Raises:
            EmailExistsError: If the email or phone is taken.
            InvalidRolesError: If any role ID does not exist.
        """
        email = str(request.email)
        if await get_user_by_email(self._db, email):
            raise EmailExistsError("A user with this email already exists.")
        if request.phone and await phone_taken(self._db, request.phone):
            raise EmailExistsError("A user with this phone number already exists.")

        role_ids = list(dict.fromkeys(request.role_ids))
        result = await self._db.execute(select(Role.id).where(Role.id.in_(role_ids)))
        found = set(result.scalars().all())
        missing = [rid for rid in role_ids if rid not in found]
        if missing:
            raise InvalidRolesError(
                f"Some role IDs are invalid: {', '.join(str(rid) for rid in missing)}"
            )

        profile = request.profile.model_dump(exclude_none=True) if request.profile else None

        try:
            user = await create_account(
                self._db,
                first_name=request.first_name,
                last_name=request.last_name,
                email=email,
                password_hash=hash_password(request.password),
                role_ids=role_ids,
                phone=request.phone,
                is_verified=False,
                profile=profile,
            )
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise EmailExistsError("A user with this email or phone already exists.") from e
        except Exception:
            await self._db.rollback()
            raise

        logger.info("User registered: %s (roles=%s)", user.id, role_ids)
        return format_user(await load_user(self._db, user.id))

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate with email and password.

        Args:
            email: Login email.
            password: Plain text password.

        Returns:
            Access token and the authenticated user.

        Raises:
            InvalidCredentialsError: If email is unknown or password is wrong.
            AccountInactiveError: If the account is not active.
        """
        user = await get_user_by_email(self._db, email)
        if not user or not verify_password(password, user.password):
            logger.info("Failed login attempt for %s", email)
            raise InvalidCredentialsError("Invalid credentials.")

        if user.status != UserStatus.ACTIVE.value:
            raise AccountInactiveError("Account is not active.")

        user = await load_user(self._db, user.id)
        token = self._jwt_manager.create_access_token(
            user_id=user.id,
            email=user.email,
            roles=user.role_names,
            is_verified=user.is_verified,
            first_name=user.first_name,
            last_name=user.last_name,
        )

        logger.info("User logged in: %s", user.id)
        return LoginResponse(
            access_token=token,
            expires_in=self._jwt_manager.expires_in,
            user=format_user(user),
        )

    async def request_password_reset(self, email: str) -> None:
        """Issue a reset token and email the reset link.

        Unknown emails return silently so callers cannot probe for accounts.
        Earlier tokens of the user are discarded.
        """
        user = await get_user_by_email(self._db, email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return

        token = str(uuid4())
        expire_minutes = self._settings.password_reset_expire_minutes
        try:
            await self._db.execute(
                delete(PasswordResetToken).where(PasswordResetToken.user_id == user.id)
            )
            self._db.add(
                PasswordResetToken(
                    token=token,
                    user_id=user.id,
                    expires_at=minutes_from_now(expire_minutes),
                )
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Password reset token issued for user %s", user.id)

        link = self._settings.frontend.reset_password_url(token)
        message = password_reset_email(user.first_name, link, expire_minutes)
        self._notifier.send_email(user.email, message.subject, message.body)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        Raises:
            InvalidResetTokenError: If the token is unknown or expired.
        """
        result = await self._db.execute(
            select(PasswordResetToken).where(PasswordResetToken.token == token)
        )
        reset_token = result.scalar_one_or_none()
        if not reset_token:
            raise InvalidResetTokenError("Invalid or expired token")

        if is_expired(reset_token.expires_at):
            await self._db.execute(
                delete(PasswordResetToken).where(PasswordResetToken.id == reset_token.id)
            )
            await self._db.commit()
            raise InvalidResetTokenError("Invalid or expired token")

        user = await self._db.get(User, reset_token.user_id)
        try:
            user.password = hash_password(new_password)
            await self._db.execute(
                delete(PasswordResetToken).where(PasswordResetToken.id == reset_token.id)
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Password reset for user %s", user.id)

        message = password_reset_done_email(user.first_name, self._settings.support_email)
        self._notifier.send_email(user.email, message.subject, message.body)
