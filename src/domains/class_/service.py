# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class service for managing class operations.

This module provides the ClassService class for:
- Class creation with teacher link and student enrollment
- Teacher assignment
- Partial updates with schedule-derived weekdays
- Class deletion with link cleanup
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from src.domains.user.accounts import user_has_role
from src.infrastructure.database.models import (
    Class,
    ClassTeacher,
    RoleName,
    School,
    Student,
    StudentClass,
    User,
)
from src.models.class_ import (
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
    days_from_schedule,
)
from src.models.common import SchoolSummary, StudentSummary, UserSummary

logger = logging.getLogger(__name__)


class ClassServiceError(DomainError):
    """Base exception for class service errors."""

    pass


class ClassNotFoundError(ClassServiceError, NotFoundError):
    """Raised when class is not found."""

    pass


class ClassCodeExistsError(ClassServiceError, ConflictError):
    """Raised when class code is already taken."""

    pass


class SchoolNotFoundError(ClassServiceError, NotFoundError):
    """Raised when school is not found."""

    pass


class TeacherNotFoundError(ClassServiceError, NotFoundError):
    """Raised when a user is missing or does not hold the teacher role."""

    pass


class InvalidStudentsError(ClassServiceError, ValidationError):
    """Raised when some student IDs do not exist."""

    pass


def student_summary(student: Student) -> StudentSummary:
    """Flatten a student and its user into a summary."""
    return StudentSummary(
        id=student.id,
        user_id=student.user_id,
        first_name=student.user.first_name,
        last_name=student.user.last_name,
        email=student.user.email,
        grade=student.grade,
        section=student.section,
        student_no=student.student_no,
    )


class ClassService:
    """Service for managing classes.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize class service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_class(self, request: ClassCreateRequest) -> ClassResponse:
        """Create a class, link its teacher and enroll its students.

        References are checked in order (code, school, teacher, students)
        and the first failure is raised.

        Args:
            request: Class creation data.

        Returns:
            Created class response.

        Raises:
            ClassCodeExistsError: If the code is taken.
            SchoolNotFoundError: If school not found.
            TeacherNotFoundError: If teacher_id is not a teacher.
            InvalidStudentsError: If any student ID does not exist.
        """
        if await self._get_by_code(request.code):
            raise ClassCodeExistsError(f"A class with code '{request.code}' already exists.")

        if not await self.db.get(School, request.school_id):
            raise SchoolNotFoundError("School not found.")

        if request.teacher_id is not None:
            await self._require_teacher(
                request.teacher_id,
                f"Teacher with ID {request.teacher_id} not found or is not a teacher.",
            )

        student_ids = list(dict.fromkeys(request.student_ids))
        if student_ids:
            result = await self.db.execute(select(Student.id).where(Student.id.in_(student_ids)))
            found = set(result.scalars().all())
            missing = [sid for sid in student_ids if sid not in found]
            if missing:
                raise InvalidStudentsError(
                    f"Invalid student IDs: {', '.join(str(sid) for sid in missing)}"
                )

        values = request.model_dump(exclude={"teacher_id", "student_ids"})
        values["status"] = request.status.value
        values["days_of_week"] = days_from_schedule(request.schedule)

        try:
            class_ = Class(**values)
            self.db.add(class_)
            await self.db.flush()

            if request.teacher_id is not None:
                self.db.add(ClassTeacher(teacher_id=request.teacher_id, class_id=class_.id))

            if student_ids:
                self.db.add_all(
                    StudentClass(student_id=sid, class_id=class_.id) for sid in student_ids
                )
                await self.db.execute(
                    update(Student)
                    .where(Student.id.in_(student_ids))
                    .values(main_class_id=class_.id)
                )

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ClassCodeExistsError(
                f"A class with code '{request.code}' already exists."
            ) from e
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Class created: %s (code=%s, school=%s, students=%d)",
            class_.id,
            class_.code,
            class_.school_id,
            len(student_ids),
        )

        return await self.get_class_by_id(class_.id)

    async def assign_teacher_to_class(self, class_id: int, teacher_id: int) -> ClassResponse:
        """Link a teacher to a class. An existing link is kept as is.

        Raises:
            ClassNotFoundError: If class not found.
            TeacherNotFoundError: If the user is missing or not a teacher.
        """
        if not await self.db.get(Class, class_id):
            raise ClassNotFoundError("Class not found.")
        await self._require_teacher(teacher_id, "Assigned user is not a teacher.")

        result = await self.db.execute(
            select(ClassTeacher).where(
                ClassTeacher.class_id == class_id,
                ClassTeacher.teacher_id == teacher_id,
            )
        )
        if result.scalar_one_or_none() is None:
            self.db.add(ClassTeacher(teacher_id=teacher_id, class_id=class_id))
            await self.db.commit()
            logger.info("Teacher %s assigned to class %s", teacher_id, class_id)

        return await self.get_class_by_id(class_id)

    async def get_all_classes(self) -> list[ClassResponse]:
        """List every class with school, teachers and students."""
        return await self._list(select(Class))

    async def get_classes_by_school_id(self, school_id: int) -> list[ClassResponse]:
        """List the classes of one school."""
        return await self._list(select(Class).where(Class.school_id == school_id))

    async def get_class_by_id(self, class_id: int) -> ClassResponse:
        """Get class by ID.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await self._get_class(class_id)
        return self._to_response(class_)

    async def update_class(self, class_id: int, request: ClassUpdateRequest) -> ClassResponse:
        """Update the fields present in the request.

        Raises:
            ClassNotFoundError: If class not found.
            SchoolNotFoundError: If the new school does not exist.
            ClassCodeExistsError: If the new code is taken.
        """
        class_ = await self._get_class(class_id)

        update_data = request.model_dump(exclude_unset=True)

        if update_data.get("school_id") is not None:
            if not await self.db.get(School, update_data["school_id"]):
                raise SchoolNotFoundError("School not found.")

        new_code = update_data.get("code")
        if new_code and new_code != class_.code and await self._get_by_code(new_code):
            raise ClassCodeExistsError(f"A class with code '{new_code}' already exists.")

        if "schedule" in update_data:
            update_data["days_of_week"] = days_from_schedule(update_data["schedule"])
        if update_data.get("status") is not None:
            update_data["status"] = request.status.value

        for field, value in update_data.items():
            if value is None and field in ("code", "name", "grade_level", "school_id", "status"):
                continue
            setattr(class_, field, value)

        code = class_.code
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ClassCodeExistsError(f"A class with code '{code}' already exists.") from e

        logger.info("Class updated: %s", class_id)
        return await self.get_class_by_id(class_id)

    async def delete_class(self, class_id: int) -> None:
        """Delete a class, its teacher links and enrollments.

        Students whose main class it was are left without one.

        Raises:
            ClassNotFoundError: If class not found.
        """
        if not await self.db.get(Class, class_id):
            raise ClassNotFoundError("Class not found.")

        try:
            await self.db.execute(delete(ClassTeacher).where(ClassTeacher.class_id == class_id))
            await self.db.execute(delete(StudentClass).where(StudentClass.class_id == class_id))
            await self.db.execute(
                update(Student)
                .where(Student.main_class_id == class_id)
                .values(main_class_id=None)
            )
            await self.db.execute(delete(Class).where(Class.id == class_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Class deleted: %s", class_id)

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _load_options(self) -> list:
        return [
            selectinload(Class.school),
            selectinload(Class.teachers),
            selectinload(Class.students).selectinload(Student.user),
        ]

    async def _get_class(self, class_id: int) -> Class:
        stmt = (
            select(Class)
            .where(Class.id == class_id)
            .options(*self._load_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        class_ = result.scalar_one_or_none()
        if not class_:
            raise ClassNotFoundError("Class not found.")
        return class_

    async def _list(self, stmt) -> list[ClassResponse]:
        stmt = (
            stmt.options(*self._load_options())
            .order_by(Class.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._to_response(class_) for class_ in result.scalars().all()]

    async def _get_by_code(self, code: str) -> Class | None:
        result = await self.db.execute(select(Class).where(Class.code == code))
        return result.scalar_one_or_none()

    async def _require_teacher(self, user_id: int, message: str) -> User:
        user = await self.db.get(User, user_id)
        if not user or not await user_has_role(self.db, user_id, RoleName.TEACHER.value):
            raise TeacherNotFoundError(message)
        return user

    def _to_response(self, class_: Class) -> ClassResponse:
        return ClassResponse(
            id=class_.id,
            code=class_.code,
            name=class_.name,
            grade_level=class_.grade_level,
            subject=class_.subject,
            semester=class_.semester,
            academic_year=class_.academic_year,
            teaching_method=class_.teaching_method,
            capacity=class_.capacity,
            max_students=class_.max_students,
            room_number=class_.room_number,
            class_logo=class_.class_logo,
            status=class_.status,
            days_of_week=class_.days_of_week or [],
            schedule=class_.schedule,
            credits=class_.credits,
            start_date=class_.start_date,
            end_date=class_.end_date,
            school_id=class_.school_id,
            school=SchoolSummary.model_validate(class_.school) if class_.school else None,
            teachers=[UserSummary.model_validate(teacher) for teacher in class_.teachers],
            students=[student_summary(student) for student in class_.students],
            created_at=class_.created_at,
            updated_at=class_.updated_at,
        )
