# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role service for the role catalogue.

Role names are globally unique, and a role cannot be removed while any user
still holds it.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ConflictError, DomainError, NotFoundError, PreconditionFailedError
from src.infrastructure.database.models import Role, UserRole
from src.models.role import RoleResponse

logger = logging.getLogger(__name__)


class RoleServiceError(DomainError):
    """Base exception for role service errors."""

    pass


class RoleNotFoundError(RoleServiceError, NotFoundError):
    """Raised when a role is not found."""

    pass


class RoleExistsError(RoleServiceError, ConflictError):
    """Raised when a role name is already taken."""

    pass


class RoleInUseError(RoleServiceError, PreconditionFailedError):
    """Raised when deleting a role that users still hold."""

    pass


class RoleService:
    """Service for listing, creating and deleting roles.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_roles(self) -> list[RoleResponse]:
        """List roles with the number of users holding each."""
        stmt = (
            select(Role.id, Role.name, func.count(UserRole.user_id))
            .outerjoin(UserRole, UserRole.role_id == Role.id)
            .group_by(Role.id, Role.name)
            .order_by(Role.id)
        )
        result = await self._db.execute(stmt)
        return [
            RoleResponse(id=role_id, name=name, user_count=count)
            for role_id, name, count in result.all()
        ]

    async def create_role(self, name: str) -> RoleResponse:
        """Create a role.

        Raises:
            RoleExistsError: If the name is taken.
        """
        existing = await self._db.execute(select(Role.id).where(Role.name == name))
        if existing.scalar_one_or_none() is not None:
            raise RoleExistsError(f"Role '{name}' already exists.")

        role = Role(name=name)
        self._db.add(role)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise RoleExistsError(f"Role '{name}' already exists.") from e

        logger.info("Role created: %s (%s)", role.id, name)
        return RoleResponse(id=role.id, name=role.name, user_count=0)

    async def delete_role(self, role_id: int) -> None:
        """Delete a role nobody holds.

        Raises:
            RoleNotFoundError: If role not found.
            RoleInUseError: If any user holds the role.
        """
        role = await self._db.get(Role, role_id)
        if not role:
            raise RoleNotFoundError("Role not found")

        result = await self._db.execute(
            select(func.count(UserRole.user_id)).where(UserRole.role_id == role_id)
        )
        if result.scalar():
            raise RoleInUseError("Cannot delete role with users")

        await self._db.execute(delete(Role).where(Role.id == role_id))
        await self._db.commit()
        logger.info("Role deleted: %s (%s)", role_id, role.name)
