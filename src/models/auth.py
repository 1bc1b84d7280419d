# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API models."""

from pydantic import BaseModel, EmailStr, Field, PositiveInt

from src.models.common import RequestModel
from src.models.user import UserResponse


class RegisterProfile(RequestModel):
    bio: str | None = Field(None, max_length=2000)
    avatar: str | None = Field(None, max_length=500)


class RegisterRequest(RequestModel):
    """Self-service registration."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, min_length=3, max_length=30)
    role_ids: list[PositiveInt] = Field(..., min_length=1)
    profile: RegisterProfile | None = None


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class ForgotPasswordRequest(RequestModel):
    email: EmailStr


class ResetPasswordRequest(RequestModel):
    token: str = Field(..., min_length=1, max_length=64)
    new_password: str = Field(..., min_length=6, max_length=128)


class LoginResponse(BaseModel):
    """Issued token and the authenticated user."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
