# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher service for teacher accounts and class assignments.

Teachers are users holding the "teacher" role. They belong to schools through
user_schools and to classes through class_teachers. Reads return the
flattened user shape with the first linked school.

Example:
    >>> service = TeacherService(db)
    >>> teacher = await service.register_teacher(request)
    >>> await service.assign_teacher_to_classes(teacher.user_id, [1, 2])
"""

import logging
import re
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from src.domains.auth.password import generate_password, hash_password
from src.domains.user.accounts import (
    create_account,
    format_user,
    get_user_by_email,
    link_school,
    load_user,
    phone_taken,
    release_account,
    upsert_profile,
    user_has_role,
    user_load_options,
)
from src.infrastructure.database.models import (
    Class,
    ClassTeacher,
    RoleName,
    School,
    SchoolAdmin,
    User,
    UserSchool,
)
from src.infrastructure.notifications import NotificationDispatcher
from src.infrastructure.notifications.templates import welcome_email
from src.models.teacher import TeacherRegisterRequest, TeacherUpdateRequest
from src.models.user import UserResponse

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


class TeacherServiceError(DomainError):
    """Base exception for teacher service errors."""

    pass


class TeacherNotFoundError(TeacherServiceError, NotFoundError):
    """Raised when a teacher is not found."""

    pass


class NotATeacherError(TeacherServiceError, ValidationError):
    """Raised when the user does not hold the teacher role."""

    pass


class TeacherExistsError(TeacherServiceError, ConflictError):
    """Raised when email or phone is already in use."""

    pass


class SchoolNotFoundError(TeacherServiceError, NotFoundError):
    """Raised when school is not found."""

    pass


class InvalidClassesError(TeacherServiceError, ValidationError):
    """Raised when some class IDs do not exist."""

    pass


class ClassSchoolMismatchError(TeacherServiceError, PreconditionFailedError):
    """Raised when a class is outside the teacher's schools."""

    pass


def normalize_phone(phone: str | None) -> str | None:
    """Strip all whitespace from a phone number; empty becomes None."""
    if phone is None:
        return None
    return WHITESPACE.sub("", phone) or None


class TeacherService:
    """Service for managing teachers.

    Attributes:
        _db: Async database session.
        _notifier: Dispatcher used for the post-commit welcome email.
    """

    def __init__(
        self,
        db: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        """Initialize the teacher service.

        Args:
            db: Async database session.
            notifier: Notification dispatcher. Defaults to a queue-backed one.
        """
        self._db = db
        self._notifier = notifier or NotificationDispatcher()

    async def register_teacher(self, request: TeacherRegisterRequest) -> UserResponse:
        """Register a teacher in a school with a generated password.

        The account starts unverified. The welcome email with the generated
        credentials is queued after commit; failing to queue it does not
        fail the registration.

        Args:
            request: Teacher registration data.

        Returns:
            The new teacher.

        Raises:
            TeacherExistsError: If email or phone is taken.
            SchoolNotFoundError: If school not found.
        """
        email = str(request.email)
        if await get_user_by_email(self._db, email):
            raise TeacherExistsError("A user with this email already exists.")

        school = await self._db.get(School, request.school_id)
        if not school:
            raise SchoolNotFoundError("School not found.")

        phone = normalize_phone(request.phone)
        if phone and await phone_taken(self._db, phone):
            raise TeacherExistsError(f"Phone number '{phone}' is already in use.")

        profile = {
            "marital_status": "SINGLE",
            "nationality": "Unknown",
            "gender": 1,
            "join_date": date.today(),
        }
        if request.profile:
            profile.update(
                (key, value)
                for key, value in request.profile.profile_values().items()
                if value is not None
            )
        profile["bio"] = profile.get("bio") or f"Teacher at {school.school_name}"

        password = generate_password()
        try:
            user = await create_account(
                self._db,
                first_name=request.first_name,
                last_name=request.last_name,
                email=email,
                password_hash=hash_password(password),
                role_names=[RoleName.TEACHER.value],
                phone=phone,
                is_verified=False,
                profile=profile,
            )
            await link_school(self._db, user.id, school.id, RoleName.TEACHER.value)
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise TeacherExistsError("A user with this email or phone already exists.") from e
        except Exception:
            await self._db.rollback()
            raise

        logger.info("Teacher registered: %s (school=%s)", user.id, school.id)

        message = welcome_email(request.first_name, email, password, "teacher")
        if not self._notifier.send_email(email, message.subject, message.body):
            logger.warning("Welcome email for teacher %s was not queued", user.id)

        return await self.get_teacher_by_id(user.id)

    async def assign_teacher_to_classes(
        self,
        teacher_id: int,
        class_ids: list[int],
    ) -> UserResponse:
        """Link a teacher to classes, skipping pairs that already exist.

        Raises:
            TeacherNotFoundError: If teacher not found.
            NotATeacherError: If the user is not a teacher.
            InvalidClassesError: If any class ID does not exist.
            ClassSchoolMismatchError: If a class is outside the teacher's schools.
        """
        if not await self._db.get(User, teacher_id):
            raise TeacherNotFoundError("Teacher not found.")
        if not await user_has_role(self._db, teacher_id, RoleName.TEACHER.value):
            raise NotATeacherError("User is not a teacher.")

        ids = list(dict.fromkeys(class_ids))
        result = await self._db.execute(select(Class.id, Class.school_id).where(Class.id.in_(ids)))
        class_schools = dict(result.all())
        missing = [cid for cid in ids if cid not in class_schools]
        if missing:
            raise InvalidClassesError(f"Invalid class IDs: {', '.join(str(cid) for cid in missing)}")

        result = await self._db.execute(
            select(UserSchool.school_id).where(UserSchool.user_id == teacher_id)
        )
        teacher_schools = set(result.scalars().all())
        if teacher_schools:
            outside = [cid for cid in ids if class_schools[cid] not in teacher_schools]
            if outside:
                raise ClassSchoolMismatchError(
                    "Classes do not belong to the teacher's school: "
                    f"{', '.join(str(cid) for cid in outside)}"
                )

        result = await self._db.execute(
            select(ClassTeacher.class_id).where(
                ClassTeacher.teacher_id == teacher_id,
                ClassTeacher.class_id.in_(ids),
            )
        )
        linked = set(result.scalars().all())
        new_ids = [cid for cid in ids if cid not in linked]

        if new_ids:
            try:
                self._db.add_all(ClassTeacher(teacher_id=teacher_id, class_id=cid) for cid in new_ids)
                await self._db.commit()
            except Exception:
                await self._db.rollback()
                raise

        logger.info(
            "Teacher %s assigned to classes %s (%d new)", teacher_id, ids, len(new_ids)
        )
        return await self.get_teacher_by_id(teacher_id)

    async def update_teacher(self, teacher_id: int, request: TeacherUpdateRequest) -> UserResponse:
        """Apply a sparse update to the teacher's account and profile.

        Raises:
            TeacherNotFoundError: If teacher not found.
            TeacherExistsError: If the new email or phone is taken.
            SchoolNotFoundError: If school_id does not exist.
        """
        user = await self._get_teacher(teacher_id)
        update_data = request.model_dump(exclude_unset=True)

        user_values = {}
        for field in ("first_name", "last_name", "status"):
            if update_data.get(field) is not None:
                user_values[field] = update_data[field]

        if update_data.get("email") is not None:
            email = str(update_data["email"])
            existing = await get_user_by_email(self._db, email)
            if existing and existing.id != teacher_id:
                raise TeacherExistsError("A user with this email already exists.")
            user_values["email"] = email

        if "phone" in update_data:
            phone = normalize_phone(update_data["phone"])
            if phone and await phone_taken(self._db, phone, exclude_user_id=teacher_id):
                raise TeacherExistsError(f"Phone number '{phone}' is already in use.")
            user_values["phone"] = phone

        school_id = update_data.get("school_id")
        if school_id is not None and not await self._db.get(School, school_id):
            raise SchoolNotFoundError("School not found.")

        profile_values = request.profile_values()

        try:
            for field, value in user_values.items():
                setattr(user, field, value)
            if profile_values:
                await upsert_profile(self._db, teacher_id, profile_values)
            if school_id is not None:
                await link_school(self._db, teacher_id, school_id, RoleName.TEACHER.value)
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise TeacherExistsError("A user with this email or phone already exists.") from e
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "Teacher updated: %s (user=%s, profile=%s)",
            teacher_id,
            sorted(user_values),
            sorted(profile_values),
        )
        return await self.get_teacher_by_id(teacher_id)

    async def delete_teacher(self, teacher_id: int) -> None:
        """Delete a teacher with class links, school links, roles and profile.

        A teacher who is also a parent, student or school manager keeps the
        account; only the teaching links and the teacher role are removed.
        School memberships backing a manager's admin row stay in place.

        Raises:
            TeacherNotFoundError: If teacher not found.
        """
        await self._get_teacher(teacher_id)

        managed = select(SchoolAdmin.school_id).where(SchoolAdmin.user_id == teacher_id)
        try:
            await self._db.execute(
                delete(ClassTeacher).where(ClassTeacher.teacher_id == teacher_id)
            )
            await self._db.execute(
                delete(UserSchool).where(
                    UserSchool.user_id == teacher_id,
                    UserSchool.school_id.not_in(managed),
                )
            )
            removed = await release_account(self._db, teacher_id, RoleName.TEACHER.value)
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise

        logger.info(
            "Teacher deleted: %s (account %s)", teacher_id, "removed" if removed else "kept"
        )

    async def get_all_teachers(self) -> list[UserResponse]:
        return await self._list(select(User).where(User.roles.any(name=RoleName.TEACHER.value)))

    async def get_teachers_by_school(self, school_id: int) -> list[UserResponse]:
        """List teachers linked to a school."""
        return await self._list(
            select(User).where(
                User.roles.any(name=RoleName.TEACHER.value),
                User.id.in_(select(UserSchool.user_id).where(UserSchool.school_id == school_id)),
            )
        )

    async def get_teacher_by_id(self, teacher_id: int) -> UserResponse:
        """Get a teacher by user ID.

        Raises:
            TeacherNotFoundError: If the user is missing or not a teacher.
        """
        user = await load_user(self._db, teacher_id)
        if not user or not user.has_role(RoleName.TEACHER.value):
            raise TeacherNotFoundError("Teacher not found.")
        return format_user(user)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _get_teacher(self, teacher_id: int) -> User:
        user = await self._db.get(User, teacher_id)
        if not user or not await user_has_role(self._db, teacher_id, RoleName.TEACHER.value):
            raise TeacherNotFoundError("Teacher not found.")
        return user

    async def _list(self, stmt) -> list[UserResponse]:
        stmt = (
            stmt.options(*user_load_options())
            .order_by(User.id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return [format_user(user) for user in result.scalars().all()]

