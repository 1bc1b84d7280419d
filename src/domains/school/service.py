# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School service for school lifecycle management.

This module provides the SchoolService that handles:
- School creation, including provisioning of a manager account
- School reads and partial updates
- Guarded school deletion with manager cleanup
- Listing school users grouped by role

Example:
    >>> school_service = SchoolService(db_session)
    >>> school = await school_service.create_school(request)
    >>> users = await school_service.get_school_users_by_role(manager_id)
"""

import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionFailedError,
)
from src.domains.auth.password import generate_password, hash_password
from src.domains.user.accounts import (
    create_account,
    delete_account,
    format_user,
    get_user_by_email,
    grant_role,
    has_other_linkage,
    link_school,
    user_load_options,
)
from src.infrastructure.database.models import (
    Class,
    Employee,
    Parent,
    ParentStudent,
    RoleName,
    School,
    SchoolAdmin,
    Student,
    User,
    UserSchool,
)
from src.infrastructure.notifications import NotificationDispatcher
from src.infrastructure.notifications.templates import welcome_email
from src.models.common import SchoolSummary, UserSummary
from src.models.school import (
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
    SchoolUsersByRole,
)
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

DUPLICATE_SCHOOL_MESSAGE = "A school with the same unique ID, email, or name already exists."

# Columns that may not be cleared through a partial update.
REQUIRED_FIELDS = frozenset({
    "school_unique_id",
    "school_name",
    "school_address",
    "school_email",
    "school_type",
    "status",
})


class SchoolServiceError(DomainError):
    """Base exception for school service errors."""

    pass


class SchoolNotFoundError(SchoolServiceError, NotFoundError):
    """Raised when a school is not found."""

    pass


class SchoolExistsError(SchoolServiceError, ConflictError):
    """Raised when a school collides on unique ID, email or name."""

    pass


class SchoolManagerNotFoundError(SchoolServiceError, NotFoundError):
    """Raised when the referenced manager user does not exist."""

    pass


class ManagerEmailExistsError(SchoolServiceError, ConflictError):
    """Raised when the email for a new manager account is taken."""

    pass


class SchoolHasDependentsError(SchoolServiceError, PreconditionFailedError):
    """Raised when classes or students still reference the school."""

    pass


class SchoolAccessError(SchoolServiceError, AuthorizationError):
    """Raised when a user does not administer any school."""

    pass


class SchoolService:
    """Service for managing schools.

    A school has exactly one manager. When no existing manager is given on
    creation, a school_manager account is provisioned in the same
    transaction and its credentials are emailed after commit.

    Attributes:
        _db: Async database session.
        _notifier: Dispatcher used for post-commit emails.
    """

    def __init__(
        self,
        db: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """Initialize the school service.

        Args:
            db: Async database session.
            notifier: Notification dispatcher. Defaults to a queue-backed one.
        """
        self._db = db
        self._notifier = notifier or NotificationDispatcher()

    async def create_school(self, request: SchoolCreateRequest) -> SchoolResponse:
        """Create a school and, if needed, its manager account.

        Args:
            request: School creation request.

        Returns:
            Created school with its manager.

        Raises:
            SchoolExistsError: If unique ID, email or name is taken.
            SchoolManagerNotFoundError: If school_manager_id does not exist.
            ManagerEmailExistsError: If the new manager's email is taken.
        """
        if await self._find_duplicate(
            request.school_unique_id, str(request.school_email), request.school_name
        ):
            raise SchoolExistsError(DUPLICATE_SCHOOL_MESSAGE)

        credentials: tuple[User, str] | None = None

        try:
            if request.school_manager_id is not None:
                manager = await self._db.get(User, request.school_manager_id)
                if not manager:
                    raise SchoolManagerNotFoundError(
                        f"Manager user with ID {request.school_manager_id} not found."
                    )
                await grant_role(self._db, manager.id, RoleName.SCHOOL_MANAGER.value)
            else:
                manager_email = str(request.manager_email or request.school_email)
                if await get_user_by_email(self._db, manager_email):
                    raise ManagerEmailExistsError(
                        f"A user with email '{manager_email}' already exists."
                    )
                password = generate_password()
                manager = await create_account(
                    self._db,
                    first_name=request.manager_first_name or request.school_name,
                    last_name=request.manager_last_name or "Manager",
                    email=manager_email,
                    password_hash=hash_password(password),
                    role_names=[RoleName.SCHOOL_MANAGER.value],
                    is_verified=True,
                    profile={"bio": f"Manager of {request.school_name}"},
                )
                credentials = (manager, password)

            values = request.model_dump(
                mode="json",
                exclude={
                    "school_manager_id",
                    "manager_email",
                    "manager_first_name",
                    "manager_last_name",
                },
            )
            school = School(**values, school_manager_id=manager.id)
            self._db.add(school)
            await self._db.flush()

            if await self._admin_row(manager.id) is None:
                self._db.add(SchoolAdmin(user_id=manager.id, school_id=school.id))
            else:
                logger.warning(
                    "User %s already administers a school, not linking admin for %s",
                    manager.id,
                    school.id,
                )
            await link_school(self._db, manager.id, school.id, RoleName.SCHOOL_MANAGER.value)

            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise SchoolExistsError(DUPLICATE_SCHOOL_MESSAGE) from e
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "School created: %s (unique_id=%s, manager=%s)",
            school.id,
            school.school_unique_id,
            manager.id,
        )

        if credentials:
            new_manager, password = credentials
            message = welcome_email(
                new_manager.first_name, new_manager.email, password, "school manager"
            )
            self._notifier.send_email(new_manager.email, message.subject, message.body)

        return await self.get_school_by_id(school.id)

    async def get_all_schools(self) -> list[SchoolResponse]:
        """List all schools with their managers."""
        stmt = (
            select(School)
            .options(selectinload(School.manager))
            .order_by(School.id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return [SchoolResponse.model_validate(school) for school in result.scalars().all()]

    async def get_school_by_id(self, school_id: int) -> SchoolResponse:
        """Get a school with its manager.

        Raises:
            SchoolNotFoundError: If school doesn't exist.
        """
        school = await self._get_school(school_id)
        return SchoolResponse.model_validate(school)

    async def update_school(
        self,
        school_id: int,
        request: SchoolUpdateRequest,
    ) -> SchoolResponse:
        """Update the fields present in the request.

        Raises:
            SchoolNotFoundError: If school doesn't exist.
            SchoolExistsError: If the update collides with another school.
        """
        school = await self._get_school(school_id)

        update_data = request.model_dump(mode="json", exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(school, field, value)

        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise SchoolExistsError(DUPLICATE_SCHOOL_MESSAGE) from e

        logger.info("School updated: %s (fields=%s)", school_id, sorted(update_data))
        return await self.get_school_by_id(school_id)

    async def delete_school(self, school_id: int) -> None:
        """Delete a school and, when unused elsewhere, its manager account.

        Raises:
            SchoolNotFoundError: If school doesn't exist.
            SchoolHasDependentsError: If classes or students reference it.
        """
        school = await self._get_school(school_id)
        manager_id = school.school_manager_id

        class_count = await self._count(select(func.count(Class.id)).where(Class.school_id == school_id))
        if class_count:
            raise SchoolHasDependentsError(
                f"Cannot delete school: it still has {class_count} class(es)."
            )
        student_count = await self._count(
            select(func.count(Student.id)).where(Student.school_id == school_id)
        )
        if student_count:
            raise SchoolHasDependentsError(
                f"Cannot delete school: it still has {student_count} student(s)."
            )

        try:
            await self._db.execute(delete(UserSchool).where(UserSchool.school_id == school_id))
            await self._db.execute(delete(SchoolAdmin).where(SchoolAdmin.school_id == school_id))
            await self._db.execute(delete(Employee).where(Employee.school_id == school_id))
            await self._db.execute(delete(School).where(School.id == school_id))

            manager_removed = False
            if not await has_other_linkage(self._db, manager_id):
                await delete_account(self._db, manager_id)
                manager_removed = True

            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "School deleted: %s (manager %s %s)",
            school_id,
            manager_id,
            "removed" if manager_removed else "kept",
        )

    async def get_school_users_by_role(self, manager_user_id: int) -> SchoolUsersByRole:
        """Group the users of the caller's school by role.

        Args:
            manager_user_id: User ID of the school admin asking.

        Raises:
            SchoolAccessError: If the user administers no school.
        """
        admin = await self._admin_row(manager_user_id)
        if admin is None:
            raise SchoolAccessError("User is not assigned as an admin of any school.")

        school = await self._get_school(admin.school_id)

        teachers = await self._users(
            select(User)
            .join(UserSchool, UserSchool.user_id == User.id)
            .where(UserSchool.school_id == school.id)
            .where(User.roles.any(name=RoleName.TEACHER.value))
        )
        students = await self._users(
            select(User).join(Student, Student.user_id == User.id).where(Student.school_id == school.id)
        )
        parents = await self._users(
            select(User)
            .join(Parent, Parent.user_id == User.id)
            .join(ParentStudent, ParentStudent.parent_id == Parent.id)
            .join(Student, Student.id == ParentStudent.student_id)
            .where(Student.school_id == school.id)
        )
        managers = await self._users(
            select(User).where(
                or_(
                    User.id == school.school_manager_id,
                    User.id.in_(
                        select(SchoolAdmin.user_id).where(SchoolAdmin.school_id == school.id)
                    ),
                )
            )
        )

        return SchoolUsersByRole(
            school=SchoolSummary.model_validate(school),
            teachers=teachers,
            students=students,
            parents=parents,
            managers=managers,
        )

    async def get_all_users_by_school_id(self, school_id: int) -> list[UserResponse]:
        """List every user linked to a school: members, students and manager.

        Raises:
            SchoolNotFoundError: If school doesn't exist.
        """
        school = await self._get_school(school_id)

        stmt = (
            select(User)
            .where(
                or_(
                    User.id == school.school_manager_id,
                    User.id.in_(select(UserSchool.user_id).where(UserSchool.school_id == school_id)),
                    User.id.in_(select(Student.user_id).where(Student.school_id == school_id)),
                )
            )
            .options(*user_load_options())
            .order_by(User.id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return [format_user(user) for user in result.scalars().all()]

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_school(self, school_id: int) -> School:
        stmt = (
            select(School)
            .where(School.id == school_id)
            .options(selectinload(School.manager))
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        school = result.scalar_one_or_none()
        if not school:
            raise SchoolNotFoundError("School not found.")
        return school

    async def _find_duplicate(self, unique_id: str, email: str, name: str) -> School | None:
        stmt = select(School).where(
            or_(
                School.school_unique_id == unique_id,
                School.school_email == email,
                School.school_name == name,
            )
        )
        result = await self._db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def _admin_row(self, user_id: int) -> SchoolAdmin | None:
        result = await self._db.execute(select(SchoolAdmin).where(SchoolAdmin.user_id == user_id))
        return result.scalar_one_or_none()

    async def _count(self, stmt) -> int:
        result = await self._db.execute(stmt)
        return result.scalar() or 0

    async def _users(self, stmt) -> list[UserSummary]:
        result = await self._db.execute(stmt.distinct().order_by(User.id))
        return [UserSummary.model_validate(user) for user in result.scalars().all()]
