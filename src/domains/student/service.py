# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service for student lifecycle management.

This module provides the StudentService class for:
- Creating students with profile, enrollments and parents
- Updating students, replacing enrollments and adding parents
- Cascading student deletion with orphaned parent cleanup
- Activation, parent relinking and medical condition reports
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from src.domains.auth.password import generate_password, hash_password
from src.domains.user.accounts import (
    create_account,
    get_user_by_email,
    grant_role,
    phone_taken,
    release_account,
    upsert_profile,
)
from src.infrastructure.database.models import (
    Class,
    Parent,
    ParentStudent,
    RoleName,
    School,
    Student,
    StudentClass,
    User,
    UserStatus,
)
from src.infrastructure.notifications import NotificationDispatcher
from src.infrastructure.notifications.templates import welcome_email
from src.models.common import ClassSummary, ParentSummary, SchoolSummary
from src.models.student import (
    ParentInfo,
    StudentCreateRequest,
    StudentResponse,
    StudentUpdateRequest,
)
from src.models.user import ProfileResponse

logger = logging.getLogger(__name__)

USER_FIELDS = ("first_name", "last_name", "email", "phone")
STUDENT_FIELDS = (
    "grade",
    "section",
    "student_no",
    "admission_date",
    "guardian_name",
    "guardian_phone",
    "health_notes",
    "special_needs",
    "allergies",
)
REQUIRED_FIELDS = frozenset({"first_name", "last_name", "email", "grade", "section", "student_no"})


class StudentServiceError(DomainError):
    """Base exception for student service errors."""

    pass


class StudentNotFoundError(StudentServiceError, NotFoundError):
    """Raised when student is not found."""

    pass


class SchoolNotFoundError(StudentServiceError, NotFoundError):
    """Raised when school is not found."""

    pass


class StudentExistsError(StudentServiceError, ConflictError):
    """Raised when email, phone or student number is already taken."""

    pass


class InvalidClassesError(StudentServiceError, ValidationError):
    """Raised when some class IDs do not exist."""

    pass


class InvalidParentsError(StudentServiceError, ValidationError):
    """Raised when some parent user IDs do not exist."""

    pass


@dataclass(frozen=True)
class NewParentAccount:
    """Credentials of a parent account created during a student workflow."""

    email: str
    first_name: str
    password: str


class StudentService:
    """Service for managing students and their parents.

    Attributes:
        db: Async database session.
        notifier: Dispatcher used for post-commit parent welcome emails.
    """

    def __init__(
        self,
        db: AsyncSession,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self.db = db
        self.notifier = notifier or NotificationDispatcher()

    async def create_student(self, request: StudentCreateRequest) -> StudentResponse:
        """Create a student account, enrollments and parent links.

        The first class in ``class_ids`` becomes the main class. Parents are
        matched by email; unknown emails get a new parent account whose
        credentials are emailed after commit.

        Args:
            request: Student creation data.

        Returns:
            Created student.

        Raises:
            StudentExistsError: If email, phone or student number is taken.
            SchoolNotFoundError: If school not found.
            InvalidClassesError: If any class ID does not exist.
            InvalidParentsError: If a parent email is the student's own.
        """
        email = str(request.email)
        if await get_user_by_email(self.db, email):
            raise StudentExistsError(f"A user with email '{email}' already exists.")
        if await self._student_no_taken(request.student_no):
            raise StudentExistsError(f"Student number '{request.student_no}' already exists.")
        if request.phone and await phone_taken(self.db, request.phone):
            raise StudentExistsError(f"Phone number '{request.phone}' is already in use.")
        if not await self.db.get(School, request.school_id):
            raise SchoolNotFoundError("School not found.")

        self._check_parent_emails(email, request.parent_info)
        class_ids = await self._validate_classes(request.class_ids)

        try:
            user = await create_account(
                self.db,
                first_name=request.first_name,
                last_name=request.last_name,
                email=email,
                password_hash=hash_password(request.password or generate_password()),
                role_names=[RoleName.STUDENT.value],
                phone=request.phone,
                is_verified=True,
                profile=request.profile.profile_values() if request.profile else None,
            )

            student = Student(
                user_id=user.id,
                school_id=request.school_id,
                main_class_id=class_ids[0] if class_ids else None,
                **request.model_dump(include=set(STUDENT_FIELDS)),
            )
            self.db.add(student)
            await self.db.flush()

            self.db.add_all(StudentClass(student_id=student.id, class_id=cid) for cid in class_ids)
            new_parents = await self._link_parents(student.id, request.parent_info)

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise StudentExistsError(
                "A user or student with the same email, phone or student number already exists."
            ) from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Student created: %s (user=%s, classes=%d, new_parents=%d)",
            student.id,
            user.id,
            len(class_ids),
            len(new_parents),
        )

        self._welcome_parents(new_parents)
        return await self.get_student_by_id(student.id)

    async def update_student(self, user_id: int, request: StudentUpdateRequest) -> StudentResponse:
        """Update a student by its user ID.

        Args:
            user_id: ID of the student's user account.
            request: Fields to change. ``class_ids`` replaces enrollments.

        Raises:
            StudentNotFoundError: If no student belongs to the user.
            StudentExistsError: If email, phone or student number is taken.
            InvalidClassesError: If any class ID does not exist.
            InvalidParentsError: If a parent email is the student's own.
        """
        result = await self.db.execute(select(Student).where(Student.user_id == user_id))
        student = result.scalar_one_or_none()
        if not student:
            raise StudentNotFoundError("Student not found.")
        user = await self.db.get(User, user_id)

        update_data = request.model_dump(exclude_unset=True)

        new_email = update_data.get("email")
        if new_email and new_email != user.email:
            existing = await get_user_by_email(self.db, str(new_email))
            if existing and existing.id != user_id:
                raise StudentExistsError(f"A user with email '{new_email}' already exists.")
        new_phone = update_data.get("phone")
        if new_phone and await phone_taken(self.db, new_phone, exclude_user_id=user_id):
            raise StudentExistsError(f"Phone number '{new_phone}' is already in use.")
        new_no = update_data.get("student_no")
        if new_no and new_no != student.student_no and await self._student_no_taken(new_no):
            raise StudentExistsError(f"Student number '{new_no}' already exists.")

        if request.parent_info:
            self._check_parent_emails(str(new_email or user.email), request.parent_info)

        class_ids = None
        if request.class_ids is not None:
            class_ids = await self._validate_classes(request.class_ids)

        try:
            for field in USER_FIELDS:
                if field in update_data:
                    if update_data[field] is None and field in REQUIRED_FIELDS:
                        continue
                    setattr(user, field, update_data[field])

            for field in STUDENT_FIELDS:
                if field in update_data:
                    if update_data[field] is None and field in REQUIRED_FIELDS:
                        continue
                    setattr(student, field, update_data[field])

            if request.profile is not None:
                await upsert_profile(self.db, user_id, request.profile.profile_values())

            if class_ids is not None:
                await self.db.execute(delete(StudentClass).where(StudentClass.student_id == student.id))
                self.db.add_all(
                    StudentClass(student_id=student.id, class_id=cid) for cid in class_ids
                )
                student.main_class_id = class_ids[0] if class_ids else None

            new_parents: list[NewParentAccount] = []
            if request.parent_info:
                new_parents = await self._link_parents(student.id, request.parent_info)

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise StudentExistsError(
                "A user or student with the same email, phone or student number already exists."
            ) from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Student updated: %s (user=%s)", student.id, user_id)

        self._welcome_parents(new_parents)
        return await self.get_student_by_id(student.id)

    async def delete_student(self, student_id: int) -> None:
        """Delete a student with its account, enrollments and parent links.

        Parents left without any child lose their Parent record. Accounts are
        deleted only when nothing else uses them; a student or parent who is
        also a teacher, manager or parent elsewhere keeps the account and
        loses just the role.

        Raises:
            StudentNotFoundError: If student not found.
        """
        student = await self.db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError("Student not found.")
        user_id = student.user_id

        result = await self.db.execute(
            select(ParentStudent.parent_id).where(ParentStudent.student_id == student_id)
        )
        parent_ids = list(result.scalars().all())

        removed_parents = 0
        try:
            await self.db.execute(delete(StudentClass).where(StudentClass.student_id == student_id))
            await self.db.execute(delete(ParentStudent).where(ParentStudent.student_id == student_id))
            await self.db.execute(delete(Student).where(Student.id == student_id))
            await release_account(self.db, user_id, RoleName.STUDENT.value)

            for parent_id in parent_ids:
                remaining = await self.db.execute(
                    select(func.count(ParentStudent.id)).where(ParentStudent.parent_id == parent_id)
                )
                if remaining.scalar():
                    continue
                parent = await self.db.get(Parent, parent_id)
                parent_user_id = parent.user_id
                await self.db.execute(delete(Parent).where(Parent.id == parent_id))
                await release_account(self.db, parent_user_id, RoleName.PARENT.value)
                removed_parents += 1

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Student deleted: %s (user=%s, orphaned parents removed=%d)",
            student_id,
            user_id,
            removed_parents,
        )

    async def activate_student(self, student_id: int) -> StudentResponse:
        """Set the student's account status to ACTIVE."""
        return await self._set_status(student_id, UserStatus.ACTIVE)

    async def deactivate_student(self, student_id: int) -> StudentResponse:
        """Set the student's account status to INACTIVE."""
        return await self._set_status(student_id, UserStatus.INACTIVE)

    async def connect_student_with_parents(
        self,
        student_id: int,
        parent_user_ids: list[int],
    ) -> StudentResponse:
        """Make the given users exactly the student's parents.

        Links to parents outside the set are removed; Parent records are
        created for users that do not have one yet.

        Raises:
            StudentNotFoundError: If student not found.
            InvalidParentsError: If any user ID does not exist or is the
                student itself.
        """
        student = await self.db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError("Student not found.")

        wanted = list(dict.fromkeys(parent_user_ids))
        if student.user_id in wanted:
            raise InvalidParentsError("A student cannot be their own parent.")
        if wanted:
            result = await self.db.execute(select(User.id).where(User.id.in_(wanted)))
            found = set(result.scalars().all())
            missing = [uid for uid in wanted if uid not in found]
            if missing:
                raise InvalidParentsError(
                    f"Invalid parent user IDs: {', '.join(str(uid) for uid in missing)}"
                )

        try:
            stale = select(Parent.id).where(Parent.user_id.not_in(wanted))
            await self.db.execute(
                delete(ParentStudent).where(
                    ParentStudent.student_id == student_id,
                    ParentStudent.parent_id.in_(stale),
                )
            )
            for user_id in wanted:
                parent = await self._get_or_create_parent(user_id)
                await self._link_parent(parent.id, student_id)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Student %s parents set to users %s", student_id, wanted)
        return await self.get_student_by_id(student_id)

    async def get_students_with_medical_conditions(
        self,
        school_id: int | None = None,
    ) -> list[StudentResponse]:
        """List students with non-empty health notes, optionally for one school."""
        stmt = select(Student).where(
            Student.health_notes.is_not(None),
            func.trim(Student.health_notes) != "",
        )
        if school_id is not None:
            stmt = stmt.where(Student.school_id == school_id)
        return await self._list(stmt)

    async def get_all_students(self) -> list[StudentResponse]:
        return await self._list(select(Student))

    async def get_students_by_school_id(self, school_id: int) -> list[StudentResponse]:
        return await self._list(select(Student).where(Student.school_id == school_id))

    async def get_students_by_class_id(self, class_id: int) -> list[StudentResponse]:
        return await self._list(
            select(Student)
            .join(StudentClass, StudentClass.student_id == Student.id)
            .where(StudentClass.class_id == class_id)
        )

    async def get_student_by_id(self, student_id: int) -> StudentResponse:
        """Get student by ID.

        Raises:
            StudentNotFoundError: If student not found.
        """
        stmt = (
            select(Student)
            .where(Student.id == student_id)
            .options(*self._load_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        student = result.scalar_one_or_none()
        if not student:
            raise StudentNotFoundError("Student not found.")
        return self._to_response(student)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _set_status(self, student_id: int, status: UserStatus) -> StudentResponse:
        student = await self.db.get(Student, student_id)
        if not student:
            raise StudentNotFoundError("Student not found.")
        user = await self.db.get(User, student.user_id)
        user.status = status.value
        await self.db.commit()

        logger.info("Student %s status set to %s", student_id, status.value)
        return await self.get_student_by_id(student_id)

    async def _student_no_taken(self, student_no: str) -> bool:
        result = await self.db.execute(
            select(Student.id).where(Student.student_no == student_no).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _validate_classes(self, class_ids: list[int]) -> list[int]:
        """Deduplicate class IDs keeping order and check they all exist."""
        ids = list(dict.fromkeys(class_ids))
        if not ids:
            return ids
        result = await self.db.execute(select(Class.id).where(Class.id.in_(ids)))
        found = set(result.scalars().all())
        missing = [cid for cid in ids if cid not in found]
        if missing:
            raise InvalidClassesError(f"Invalid class IDs: {', '.join(str(cid) for cid in missing)}")
        return ids

    def _check_parent_emails(self, student_email: str, parent_info: list[ParentInfo]) -> None:
        """Reject parent entries that point back at the student's own account."""
        if any(str(info.email).lower() == student_email.lower() for info in parent_info):
            raise InvalidParentsError("A student cannot be their own parent.")

    async def _link_parents(
        self,
        student_id: int,
        parent_info: list[ParentInfo],
    ) -> list[NewParentAccount]:
        """Find or create a parent per email and link each one to the student.

        Returns:
            Credentials of the parent accounts created here.
        """
        created: list[NewParentAccount] = []
        seen: set[str] = set()

        for info in parent_info:
            email = str(info.email)
            if email.lower() in seen:
                continue
            seen.add(email.lower())

            user = await get_user_by_email(self.db, email)
            if user is None:
                phone = info.phone
                if phone and await phone_taken(self.db, phone):
                    logger.warning("Phone of new parent %s already in use, not stored", email)
                    phone = None
                password = generate_password()
                user = await create_account(
                    self.db,
                    first_name=info.first_name,
                    last_name=info.last_name,
                    email=email,
                    password_hash=hash_password(password),
                    role_names=[RoleName.PARENT.value],
                    phone=phone,
                    is_verified=True,
                )
                created.append(NewParentAccount(email, info.first_name, password))

            parent = await self._get_or_create_parent(user.id)
            await self._link_parent(parent.id, student_id)

        return created

    async def _get_or_create_parent(self, user_id: int) -> Parent:
        result = await self.db.execute(select(Parent).where(Parent.user_id == user_id))
        parent = result.scalar_one_or_none()
        if parent is None:
            await grant_role(self.db, user_id, RoleName.PARENT.value)
            parent = Parent(user_id=user_id)
            self.db.add(parent)
            await self.db.flush()
        return parent

    async def _link_parent(self, parent_id: int, student_id: int) -> None:
        result = await self.db.execute(
            select(ParentStudent.id).where(
                ParentStudent.parent_id == parent_id,
                ParentStudent.student_id == student_id,
            )
        )
        if result.scalar_one_or_none() is None:
            self.db.add(ParentStudent(parent_id=parent_id, student_id=student_id))
            await self.db.flush()

    def _welcome_parents(self, parents: list[NewParentAccount]) -> None:
        for account in parents:
            message = welcome_email(account.first_name, account.email, account.password, "parent")
            self.notifier.send_email(account.email, message.subject, message.body)

    def _load_options(self) -> list:
        return [
            selectinload(Student.user).selectinload(User.profile),
            selectinload(Student.school),
            selectinload(Student.classes),
            selectinload(Student.parents).selectinload(Parent.user),
        ]

    async def _list(self, stmt) -> list[StudentResponse]:
        stmt = (
            stmt.options(*self._load_options())
            .order_by(Student.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._to_response(student) for student in result.scalars().unique().all()]

    def _to_response(self, student: Student) -> StudentResponse:
        user = student.user
        return StudentResponse(
            id=student.id,
            user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            status=user.status,
            is_verified=user.is_verified,
            school_id=student.school_id,
            school=SchoolSummary.model_validate(student.school) if student.school else None,
            grade=student.grade,
            section=student.section,
            student_no=student.student_no,
            admission_date=student.admission_date,
            main_class_id=student.main_class_id,
            guardian_name=student.guardian_name,
            guardian_phone=student.guardian_phone,
            health_notes=student.health_notes,
            special_needs=student.special_needs,
            allergies=student.allergies,
            profile=ProfileResponse.model_validate(user.profile) if user.profile else None,
            classes=[ClassSummary.model_validate(cls) for cls in student.classes],
            parents=[
                ParentSummary(
                    id=parent.id,
                    user_id=parent.user_id,
                    first_name=parent.user.first_name,
                    last_name=parent.user.last_name,
                    email=parent.user.email,
                    phone=parent.user.phone,
                )
                for parent in student.parents
            ],
            created_at=student.created_at,
        )
