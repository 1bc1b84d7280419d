# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models for the HTTP API."""

from src.models.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from src.models.class_ import (
    AssignTeacherRequest,
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
)
from src.models.common import (
    ApiResponse,
    ClassSummary,
    ErrorResponse,
    ParentSummary,
    RequestModel,
    SchoolSummary,
    StudentSummary,
    UserSummary,
)
from src.models.role import RoleCreateRequest, RoleResponse
from src.models.school import (
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
    SchoolUsersByRole,
)
from src.models.student import (
    ConnectParentsRequest,
    ParentInfo,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)
from src.models.teacher import (
    AssignClassesRequest,
    TeacherRegisterRequest,
    TeacherUpdateRequest,
)
from src.models.user import (
    ProfileInput,
    ProfileResponse,
    UserProfileUpdateRequest,
    UserResponse,
    VerifyUserRequest,
)

__all__ = [
    "ApiResponse",
    "AssignClassesRequest",
    "AssignTeacherRequest",
    "ClassCreateRequest",
    "ClassResponse",
    "ClassSummary",
    "ClassUpdateRequest",
    "ConnectParentsRequest",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "ParentInfo",
    "ParentSummary",
    "ProfileInput",
    "ProfileResponse",
    "RegisterRequest",
    "RequestModel",
    "ResetPasswordRequest",
    "RoleCreateRequest",
    "RoleResponse",
    "SchoolCreateRequest",
    "SchoolResponse",
    "SchoolSummary",
    "SchoolUpdateRequest",
    "SchoolUsersByRole",
    "StudentCreateRequest",
    "StudentResponse",
    "StudentSummary",
    "StudentUpdateRequest",
    "TeacherRegisterRequest",
    "TeacherUpdateRequest",
    "UserProfileUpdateRequest",
    "UserResponse",
    "UserSummary",
    "VerifyUserRequest",
]
