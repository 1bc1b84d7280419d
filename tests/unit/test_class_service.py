# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Class service."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from src.domains.class_.service import (
    ClassCodeExistsError,
    ClassNotFoundError,
    InvalidStudentsError,
    SchoolNotFoundError,
    TeacherNotFoundError,
)
from src.infrastructure.database.models import ClassTeacher, StudentClass
from src.models.class_ import ClassUpdateRequest
from tests.factories import class_request, student_request


class TestClassServiceCreate:
    """Tests for class creation."""

    @pytest.mark.asyncio
    async def test_days_of_week_follow_schedule(self, math_class):
        """Only days with a time range count as class days."""
        assert math_class.code == "MATH101"
        assert math_class.days_of_week == ["monday"]
        assert math_class.schedule == {"monday": "08:00-09:00", "tuesday": ""}
        assert math_class.status == "active"

    @pytest.mark.asyncio
    async def test_create_with_teacher_and_students(
        self, class_service, student_service, school, teacher
    ):
        student = await student_service.create_student(student_request(school.id))

        created = await class_service.create_class(
            class_request(
                school.id,
                code="SCI201",
                name="Science",
                teacher_id=teacher.user_id,
                student_ids=[student.id],
            )
        )

        assert [t.id for t in created.teachers] == [teacher.user_id]
        assert [s.id for s in created.students] == [student.id]
        refreshed = await student_service.get_student_by_id(student.id)
        assert refreshed.main_class_id == created.id

    @pytest.mark.asyncio
    async def test_duplicate_code_conflicts(self, class_service, school, math_class):
        with pytest.raises(ClassCodeExistsError):
            await class_service.create_class(class_request(school.id, name="Algebra"))

    @pytest.mark.asyncio
    async def test_missing_school(self, class_service):
        with pytest.raises(SchoolNotFoundError):
            await class_service.create_class(class_request(99))

    @pytest.mark.asyncio
    async def test_non_teacher_rejected(self, class_service, school):
        with pytest.raises(TeacherNotFoundError):
            await class_service.create_class(
                class_request(school.id, teacher_id=school.school_manager_id)
            )

    @pytest.mark.asyncio
    async def test_invalid_students_listed(self, class_service, school):
        with pytest.raises(InvalidStudentsError) as exc_info:
            await class_service.create_class(class_request(school.id, student_ids=[7, 8]))

        assert exc_info.value.message == "Invalid student IDs: 7, 8"


class TestClassServiceTeacher:
    """Tests for teacher assignment."""

    @pytest.mark.asyncio
    async def test_assign_is_idempotent(self, class_service, math_class, teacher, db_session):
        await class_service.assign_teacher_to_class(math_class.id, teacher.user_id)
        result = await class_service.assign_teacher_to_class(math_class.id, teacher.user_id)

        assert [t.id for t in result.teachers] == [teacher.user_id]
        links = await db_session.execute(
            select(func.count(ClassTeacher.id)).where(ClassTeacher.class_id == math_class.id)
        )
        assert links.scalar() == 1

    @pytest.mark.asyncio
    async def test_assign_non_teacher(self, class_service, math_class, school):
        with pytest.raises(TeacherNotFoundError) as exc_info:
            await class_service.assign_teacher_to_class(math_class.id, school.school_manager_id)

        assert exc_info.value.message == "Assigned user is not a teacher."

    @pytest.mark.asyncio
    async def test_assign_missing_class(self, class_service, teacher):
        with pytest.raises(ClassNotFoundError):
            await class_service.assign_teacher_to_class(404, teacher.user_id)


class TestClassServiceUpdateDelete:
    """Tests for class updates and deletion."""

    @pytest.mark.asyncio
    async def test_update_schedule_recomputes_days(self, class_service, math_class):
        result = await class_service.update_class(
            math_class.id,
            ClassUpdateRequest(schedule={"Wednesday": "10:00-11:00", "Friday": "12:00-13:00"}),
        )

        assert result.days_of_week == ["wednesday", "friday"]
        assert result.name == "Mathematics"

    @pytest.mark.asyncio
    async def test_update_without_schedule_keeps_days(self, class_service, math_class):
        result = await class_service.update_class(math_class.id, ClassUpdateRequest(name="Maths"))

        assert result.name == "Maths"
        assert result.days_of_week == ["monday"]

    @pytest.mark.asyncio
    async def test_update_to_taken_code(self, class_service, school, math_class):
        other = await class_service.create_class(class_request(school.id, code="SCI201"))

        with pytest.raises(ClassCodeExistsError):
            await class_service.update_class(other.id, ClassUpdateRequest(code="MATH101"))

    @pytest.mark.asyncio
    async def test_commit_conflict_names_current_code(
        self, class_service, math_class, db_session, monkeypatch
    ):
        failure = IntegrityError("UPDATE classes", {}, Exception("UNIQUE constraint failed"))
        monkeypatch.setattr(db_session, "commit", AsyncMock(side_effect=failure))

        with pytest.raises(ClassCodeExistsError) as exc_info:
            await class_service.update_class(math_class.id, ClassUpdateRequest(name="Maths"))

        assert exc_info.value.message == "A class with code 'MATH101' already exists."

    @pytest.mark.asyncio
    async def test_delete_clears_links_and_main_class(
        self, class_service, student_service, school, math_class, teacher, db_session
    ):
        await class_service.assign_teacher_to_class(math_class.id, teacher.user_id)
        student = await student_service.create_student(
            student_request(school.id, class_ids=[math_class.id])
        )

        await class_service.delete_class(math_class.id)

        with pytest.raises(ClassNotFoundError):
            await class_service.get_class_by_id(math_class.id)
        refreshed = await student_service.get_student_by_id(student.id)
        assert refreshed.main_class_id is None
        assert refreshed.classes == []
        for model in (ClassTeacher, StudentClass):
            result = await db_session.execute(
                select(func.count(model.id)).where(model.class_id == math_class.id)
            )
            assert result.scalar() == 0

    @pytest.mark.asyncio
    async def test_list_by_school(self, class_service, school, math_class):
        classes = await class_service.get_classes_by_school_id(school.id)

        assert [c.code for c in classes] == ["MATH101"]
        assert await class_service.get_classes_by_school_id(school.id + 1) == []
