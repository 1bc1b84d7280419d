# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role management API endpoints.

- GET /getRoles - List roles with their user counts
- POST /insert-role - Create a role (admin)
- DELETE /{role_id} - Delete a role without users (admin)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.responses import success
from src.domains.role.service import RoleService
from src.models.common import ApiResponse
from src.models.role import RoleCreateRequest, RoleResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_role_service(db: AsyncSession = Depends(get_db)) -> RoleService:
    return RoleService(db=db)


@router.get(
    "/getRoles",
    response_model=ApiResponse[list[RoleResponse]],
    summary="List roles",
)
async def get_roles(
    current_user: CurrentUser = Depends(require_auth),
    service: RoleService = Depends(_get_role_service),
) -> ApiResponse:
    roles = await service.get_roles()
    return success("Roles retrieved successfully.", roles)


@router.post(
    "/insert-role",
    response_model=ApiResponse[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
)
async def insert_role(
    data: RoleCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(_get_role_service),
) -> ApiResponse:
    role = await service.create_role(data.name)
    return success("Role created successfully.", role)


@router.delete(
    "/{role_id}",
    response_model=ApiResponse[None],
    summary="Delete role",
    description="Fails while any user holds the role.",
)
async def delete_role(
    role_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(_get_role_service),
) -> ApiResponse:
    logger.info("Deleting role %s, by=%s", role_id, current_user.id)
    await service.delete_role(role_id)
    return success("Role deleted successfully.")
