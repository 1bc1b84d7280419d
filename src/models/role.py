# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role API models."""

from pydantic import BaseModel, Field

from src.models.common import RequestModel


class RoleCreateRequest(RequestModel):
    name: str = Field(..., min_length=2, max_length=50)


class RoleResponse(BaseModel):
    """Role with the number of users holding it."""

    id: int
    name: str
    user_count: int = 0
