# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This module provides authentication services:
- Password hashing with bcrypt
- JWT access token creation and validation
- Registration, login and password resets

Exports:
    PasswordHasher: Secure password hashing using bcrypt.
    JWTManager: JWT token creation and validation.
    AuthService: Registration, login and password reset service.
"""

from src.domains.auth.jwt import InvalidTokenError, JWTManager, TokenExpiredError, TokenPayload
from src.domains.auth.password import PasswordHasher, generate_password
from src.domains.auth.service import (
    AccountInactiveError,
    AuthService,
    AuthServiceError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    InvalidRolesError,
)

__all__ = [
    "AccountInactiveError",
    "AuthService",
    "AuthServiceError",
    "EmailExistsError",
    "InvalidCredentialsError",
    "InvalidResetTokenError",
    "InvalidRolesError",
    "InvalidTokenError",
    "JWTManager",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenPayload",
    "generate_password",
]
