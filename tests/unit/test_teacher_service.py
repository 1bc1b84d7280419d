# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Teacher service."""

import pytest
from sqlalchemy import func, select

from src.domains.school.service import SchoolService
from src.domains.teacher.service import (
    ClassSchoolMismatchError,
    InvalidClassesError,
    NotATeacherError,
    SchoolNotFoundError,
    TeacherExistsError,
    TeacherNotFoundError,
    normalize_phone,
)
from src.domains.user.accounts import get_user_by_email, user_has_role
from src.infrastructure.database.models import (
    ClassTeacher,
    School,
    SchoolAdmin,
    User,
    UserProfile,
    UserSchool,
)
from src.models.teacher import TeacherRegisterRequest, TeacherUpdateRequest
from tests.factories import class_request, school_request, student_request


class TestTeacherRegistration:
    """Tests for teacher registration."""

    @pytest.mark.asyncio
    async def test_register_defaults(self, teacher, school, db_session):
        assert teacher.roles == ["teacher"]
        assert teacher.is_verified is False
        assert teacher.school.id == school.id

        result = await db_session.execute(
            select(UserProfile).where(UserProfile.user_id == teacher.user_id)
        )
        profile = result.scalar_one()
        assert profile.marital_status == "SINGLE"
        assert profile.nationality == "Unknown"
        assert profile.gender == 1
        assert profile.bio == "Teacher at Riyadh-1"
        assert profile.join_date is not None

    @pytest.mark.asyncio
    async def test_register_emails_credentials(self, teacher, notifier):
        sent = notifier.emails_to("huda@teachers.com")

        assert len(sent) == 1
        assert "teacher" in sent[0].body
        assert "Password:" in sent[0].body

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, teacher_service, teacher, school):
        with pytest.raises(TeacherExistsError):
            await teacher_service.register_teacher(
                TeacherRegisterRequest(
                    first_name="Other",
                    last_name="Person",
                    email="huda@teachers.com",
                    school_id=school.id,
                )
            )

    @pytest.mark.asyncio
    async def test_register_unknown_school(self, teacher_service, db_session):
        with pytest.raises(SchoolNotFoundError):
            await teacher_service.register_teacher(
                TeacherRegisterRequest(
                    first_name="Nora",
                    last_name="Hamad",
                    email="nora@teachers.com",
                    school_id=77,
                )
            )

        assert await get_user_by_email(db_session, "nora@teachers.com") is None

    @pytest.mark.asyncio
    async def test_register_normalizes_phone(self, teacher_service, school):
        result = await teacher_service.register_teacher(
            TeacherRegisterRequest(
                first_name="Nora",
                last_name="Hamad",
                email="nora@teachers.com",
                phone="+966 50 123 4567",
                school_id=school.id,
            )
        )

        assert result.phone == "+966501234567"

    def test_normalize_phone(self):
        assert normalize_phone(" 050 12 ") == "05012"
        assert normalize_phone("   ") is None
        assert normalize_phone(None) is None


class TestTeacherClasses:
    """Tests for teacher class assignment."""

    @pytest.mark.asyncio
    async def test_assign_twice_keeps_one_link(
        self, teacher_service, teacher, math_class, db_session
    ):
        await teacher_service.assign_teacher_to_classes(teacher.user_id, [math_class.id])
        result = await teacher_service.assign_teacher_to_classes(
            teacher.user_id, [math_class.id, math_class.id]
        )

        assert [c.id for c in result.classes] == [math_class.id]
        links = await db_session.execute(select(func.count(ClassTeacher.id)))
        assert links.scalar() == 1

    @pytest.mark.asyncio
    async def test_class_from_other_school(
        self, teacher_service, class_service, teacher, db_session, notifier
    ):
        other = await SchoolService(db_session, notifier).create_school(
            school_request(
                school_unique_id="SCH-2",
                school_name="Jeddah-1",
                school_email="office@jeddah1.com",
            )
        )
        foreign = await class_service.create_class(class_request(other.id, code="ENG301"))

        with pytest.raises(ClassSchoolMismatchError):
            await teacher_service.assign_teacher_to_classes(teacher.user_id, [foreign.id])

    @pytest.mark.asyncio
    async def test_unknown_class(self, teacher_service, teacher):
        with pytest.raises(InvalidClassesError):
            await teacher_service.assign_teacher_to_classes(teacher.user_id, [321])

    @pytest.mark.asyncio
    async def test_non_teacher(self, teacher_service, school, math_class):
        with pytest.raises(NotATeacherError):
            await teacher_service.assign_teacher_to_classes(
                school.school_manager_id, [math_class.id]
            )


class TestTeacherUpdateDelete:
    """Tests for teacher updates and deletion."""

    @pytest.mark.asyncio
    async def test_sparse_update(self, teacher_service, teacher, db_session):
        result = await teacher_service.update_teacher(
            teacher.user_id,
            TeacherUpdateRequest(last_name="Salem", nationality="Saudi", status="INACTIVE"),
        )

        assert result.last_name == "Salem"
        assert result.first_name == "Huda"
        assert result.status == "INACTIVE"
        assert result.profile.nationality == "Saudi"
        assert result.profile.marital_status == "SINGLE"

    @pytest.mark.asyncio
    async def test_update_email_taken(self, teacher_service, teacher, school):
        with pytest.raises(TeacherExistsError):
            await teacher_service.update_teacher(
                teacher.user_id, TeacherUpdateRequest(email=school.manager.email)
            )

    @pytest.mark.asyncio
    async def test_delete(self, teacher_service, teacher, math_class, db_session):
        await teacher_service.assign_teacher_to_classes(teacher.user_id, [math_class.id])

        await teacher_service.delete_teacher(teacher.user_id)

        with pytest.raises(TeacherNotFoundError):
            await teacher_service.get_teacher_by_id(teacher.user_id)
        links = await db_session.execute(select(func.count(ClassTeacher.id)))
        assert links.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_teacher_who_is_a_parent_keeps_account(
        self, teacher_service, student_service, teacher, school, math_class, db_session
    ):
        student = await student_service.create_student(student_request(school.id))
        await student_service.connect_student_with_parents(student.id, [teacher.user_id])
        await teacher_service.assign_teacher_to_classes(teacher.user_id, [math_class.id])

        await teacher_service.delete_teacher(teacher.user_id)

        with pytest.raises(TeacherNotFoundError):
            await teacher_service.get_teacher_by_id(teacher.user_id)
        reloaded = await student_service.get_student_by_id(student.id)
        assert [p.email for p in reloaded.parents] == ["huda@teachers.com"]
        assert await user_has_role(db_session, teacher.user_id, "parent")
        links = await db_session.execute(select(func.count(ClassTeacher.id)))
        assert links.scalar() == 0
        memberships = await db_session.execute(
            select(func.count(UserSchool.id)).where(UserSchool.user_id == teacher.user_id)
        )
        assert memberships.scalar() == 0

    @pytest.mark.asyncio
    async def test_delete_teacher_who_manages_a_school_keeps_account(
        self, teacher_service, db_session, notifier, teacher, school
    ):
        managed = await SchoolService(db_session, notifier).create_school(
            school_request(
                school_unique_id="SCH-2",
                school_name="Jeddah-1",
                school_email="office@jeddah1.com",
                school_manager_id=teacher.user_id,
            )
        )

        await teacher_service.delete_teacher(teacher.user_id)

        assert await db_session.get(User, teacher.user_id, populate_existing=True) is not None
        stored = await db_session.get(School, managed.id, populate_existing=True)
        assert stored.school_manager_id == teacher.user_id
        assert not await user_has_role(db_session, teacher.user_id, "teacher")
        result = await db_session.execute(
            select(UserSchool.school_id).where(UserSchool.user_id == teacher.user_id)
        )
        assert result.scalars().all() == [managed.id]
        admin = await db_session.execute(
            select(SchoolAdmin.school_id).where(SchoolAdmin.user_id == teacher.user_id)
        )
        assert admin.scalar_one() == managed.id

    @pytest.mark.asyncio
    async def test_lists(self, teacher_service, teacher, school):
        assert [t.user_id for t in await teacher_service.get_all_teachers()] == [teacher.user_id]
        by_school = await teacher_service.get_teachers_by_school(school.id)
        assert [t.user_id for t in by_school] == [teacher.user_id]
        assert await teacher_service.get_teachers_by_school(school.id + 1) == []
