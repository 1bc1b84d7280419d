# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role domain package."""

from src.domains.role.service import (
    RoleExistsError,
    RoleInUseError,
    RoleNotFoundError,
    RoleService,
    RoleServiceError,
)

__all__ = [
    "RoleExistsError",
    "RoleInUseError",
    "RoleNotFoundError",
    "RoleService",
    "RoleServiceError",
]
