# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account building blocks shared by the domain services.

Schools, teachers, students, parents and self-registration all create the
same User + role links + UserProfile triple, and deleting any of them ends
with the same account teardown. These helpers only flush; committing is left
to the calling service so each workflow stays a single transaction.
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.base import ExecutableOption

from src.core.exceptions import PreconditionFailedError
from src.infrastructure.database.models import (
    ClassTeacher,
    Employee,
    Parent,
    PasswordResetToken,
    Role,
    School,
    SchoolAdmin,
    Student,
    User,
    UserProfile,
    UserRole,
    UserSchool,
    UserStatus,
)
from src.models.common import ClassSummary, SchoolSummary
from src.models.user import ProfileResponse, UserResponse

logger = logging.getLogger(__name__)


class RoleNotConfiguredError(PreconditionFailedError):
    """Raised when a built-in role has not been seeded."""

    pass


def user_load_options() -> list[ExecutableOption]:
    """Eager loads needed by format_user."""
    return [
        selectinload(User.profile),
        selectinload(User.roles),
        selectinload(User.schools),
        selectinload(User.teacher_classes),
    ]


async def load_user(db: AsyncSession, user_id: int) -> User | None:
    """Load a user with everything format_user reads, bypassing stale state."""
    stmt = (
        select(User)
        .where(User.id == user_id)
        .options(*user_load_options())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def phone_taken(db: AsyncSession, phone: str, exclude_user_id: int | None = None) -> bool:
    """Check whether a phone number belongs to a different user."""
    stmt = select(User.id).where(User.phone == phone)
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def get_role(db: AsyncSession, name: str) -> Role:
    """Fetch a role by name.

    Raises:
        RoleNotConfiguredError: If the role does not exist.
    """
    result = await db.execute(select(Role).where(Role.name == name))
    role = result.scalar_one_or_none()
    if not role:
        raise RoleNotConfiguredError(f"Role '{name}' is not configured")
    return role


async def user_has_role(db: AsyncSession, user_id: int, name: str) -> bool:
    stmt = (
        select(UserRole.user_id)
        .join(Role, Role.id == UserRole.role_id)
        .where(UserRole.user_id == user_id, Role.name == name)
    )
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def create_account(
    db: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    email: str,
    password_hash: str,
    role_names: list[str] | None = None,
    role_ids: list[int] | None = None,
    phone: str | None = None,
    status: str = UserStatus.ACTIVE.value,
    is_verified: bool = False,
    profile: dict[str, Any] | None = None,
) -> User:
    """Insert a user with its role links and an (optionally empty) profile.

    Args:
        db: Session of the calling workflow.
        first_name: Given name.
        last_name: Family name.
        email: Unique login email.
        password_hash: Already hashed password.
        role_names: Built-in roles to grant by name.
        role_ids: Roles to grant by id, already validated by the caller.
        phone: Optional unique phone number.
        status: Initial account status.
        is_verified: Initial verification flag.
        profile: Profile column values.

    Returns:
        The flushed user, with its id assigned.
    """
    ids = list(role_ids or [])
    for name in role_names or []:
        role = await get_role(db, name)
        ids.append(role.id)

    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password_hash,
        phone=phone,
        status=status,
        is_verified=is_verified,
    )
    db.add(user)
    await db.flush()

    for role_id in dict.fromkeys(ids):
        db.add(UserRole(user_id=user.id, role_id=role_id))
    db.add(UserProfile(user_id=user.id, **(profile or {})))
    await db.flush()

    logger.debug("Account created: %s (roles=%s)", user.id, ids)
    return user


async def grant_role(db: AsyncSession, user_id: int, name: str) -> None:
    """Add a built-in role to a user unless already held."""
    if await user_has_role(db, user_id, name):
        return
    role = await get_role(db, name)
    db.add(UserRole(user_id=user_id, role_id=role.id))
    await db.flush()


async def upsert_profile(db: AsyncSession, user_id: int, values: dict[str, Any]) -> UserProfile:
    """Write the given profile fields, creating the profile when missing."""
    result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        profile = UserProfile(user_id=user_id, **values)
        db.add(profile)
    else:
        for key, value in values.items():
            setattr(profile, key, value)
    await db.flush()
    return profile


async def link_school(db: AsyncSession, user_id: int, school_id: int, role: str | None) -> None:
    """Create the user_schools row unless it exists."""
    result = await db.execute(
        select(UserSchool).where(
            UserSchool.user_id == user_id,
            UserSchool.school_id == school_id,
        )
    )
    if result.scalar_one_or_none() is None:
        db.add(UserSchool(user_id=user_id, school_id=school_id, role=role))
        await db.flush()


async def revoke_role(db: AsyncSession, user_id: int, name: str) -> None:
    """Remove a built-in role from a user if held."""
    role_id = select(Role.id).where(Role.name == name).scalar_subquery()
    await db.execute(
        delete(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
    )


async def account_references(db: AsyncSession, user_id: int) -> list[str]:
    """Name the records that still point at a user.

    Rows removed by delete_account itself (roles, profile, reset tokens,
    employee record) are not counted.

    Returns:
        Kinds of remaining linkage, empty when the account is free to delete.
    """
    checks = {
        "school_manager": select(func.count(School.id)).where(School.school_manager_id == user_id),
        "school_admin": select(func.count(SchoolAdmin.id)).where(SchoolAdmin.user_id == user_id),
        "school_member": select(func.count(UserSchool.id)).where(UserSchool.user_id == user_id),
        "class_teacher": select(func.count(ClassTeacher.id)).where(
            ClassTeacher.teacher_id == user_id
        ),
        "student": select(func.count(Student.id)).where(Student.user_id == user_id),
        "parent": select(func.count(Parent.id)).where(Parent.user_id == user_id),
    }
    found = []
    for kind, stmt in checks.items():
        result = await db.execute(stmt)
        if result.scalar():
            found.append(kind)
    return found


async def has_other_linkage(db: AsyncSession, user_id: int) -> bool:
    return bool(await account_references(db, user_id))


async def release_account(db: AsyncSession, user_id: int, role: str) -> bool:
    """Drop one role from a user and delete the account if nothing else uses it.

    The caller must already have removed the rows that tied the user to
    ``role`` (its Student or Parent record, class or school links).

    Returns:
        True when the account was deleted, False when it was kept.
    """
    await revoke_role(db, user_id, role)
    references = await account_references(db, user_id)
    if references:
        logger.info(
            "Account %s kept without role %s (still %s)", user_id, role, ", ".join(references)
        )
        return False
    await delete_account(db, user_id)
    return True


async def delete_account(db: AsyncSession, user_id: int) -> None:
    """Remove a user and every row that references it by user id.

    Student and parent records must already be gone; their cascades are
    owned by the student service. Callers that cannot rule out other
    linkage go through release_account instead.
    """
    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))
    await db.execute(delete(ClassTeacher).where(ClassTeacher.teacher_id == user_id))
    await db.execute(delete(UserSchool).where(UserSchool.user_id == user_id))
    await db.execute(delete(SchoolAdmin).where(SchoolAdmin.user_id == user_id))
    await db.execute(delete(Employee).where(Employee.user_id == user_id))
    await db.execute(delete(UserRole).where(UserRole.user_id == user_id))
    await db.execute(delete(UserProfile).where(UserProfile.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    logger.debug("Account deleted: %s", user_id)


def format_user(user: User) -> UserResponse:
    """Shape a user loaded with user_load_options for API consumers."""
    school = user.schools[0] if user.schools else None
    return UserResponse(
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        status=user.status,
        is_verified=user.is_verified,
        roles=user.role_names,
        school=SchoolSummary.model_validate(school) if school else None,
        profile=ProfileResponse.model_validate(user.profile) if user.profile else None,
        classes=[ClassSummary.model_validate(cls) for cls in user.teacher_classes],
        created_at=user.created_at,
    )
