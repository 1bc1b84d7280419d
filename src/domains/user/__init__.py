# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package.

This package provides user management functionality:
- UserService: reads, verification and profile updates
- accounts: account creation, teardown and formatting shared by services
- Exceptions: User-related error types

Example:
    >>> from src.domains.user import UserService
    >>> service = UserService(db)
    >>> user = await service.get_user_by_id(1)
"""

from src.domains.user.accounts import RoleNotConfiguredError, format_user
from src.domains.user.service import (
    PhoneInUseError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "PhoneInUseError",
    "RoleNotConfiguredError",
    "UserNotFoundError",
    "UserService",
    "UserServiceError",
    "format_user",
]
