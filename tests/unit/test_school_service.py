# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for School service."""

import pytest
from sqlalchemy import func, select

from src.domains.school.service import (
    ManagerEmailExistsError,
    SchoolAccessError,
    SchoolExistsError,
    SchoolHasDependentsError,
    SchoolManagerNotFoundError,
    SchoolNotFoundError,
)
from src.domains.user.accounts import user_has_role
from src.infrastructure.database.models import (
    Class,
    School,
    SchoolAdmin,
    User,
    UserProfile,
    UserRole,
    UserSchool,
)
from src.models.school import SchoolUpdateRequest
from src.models.student import ParentInfo
from tests.factories import school_request, student_request


async def count(db, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar()


class TestSchoolServiceCreate:
    """Tests for school creation."""

    @pytest.mark.asyncio
    async def test_create_without_manager_creates_one_manager(
        self, school_service, db_session, notifier
    ):
        """Riyadh-1 / SCH-1 without a manager gets exactly one new manager."""
        school = await school_service.create_school(school_request())

        managers = await db_session.execute(
            select(User).where(User.roles.any(name="school_manager"))
        )
        managers = managers.scalars().all()

        assert len(managers) == 1
        assert school.school_manager_id == managers[0].id
        assert school.school_unique_id == "SCH-1"
        assert school.school_name == "Riyadh-1"
        assert school.manager.email == "office@riyadh1.com"
        assert managers[0].is_verified is True

    @pytest.mark.asyncio
    async def test_create_links_manager_as_admin_and_member(self, school_service, db_session):
        school = await school_service.create_school(school_request())

        admin = await db_session.execute(
            select(SchoolAdmin).where(SchoolAdmin.user_id == school.school_manager_id)
        )
        assert admin.scalar_one().school_id == school.id
        assert await count(
            db_session,
            select(func.count(UserSchool.id)).where(
                UserSchool.user_id == school.school_manager_id,
                UserSchool.school_id == school.id,
            ),
        ) == 1

    @pytest.mark.asyncio
    async def test_create_emails_new_manager_credentials(self, school_service, notifier):
        await school_service.create_school(
            school_request(manager_email="principal@riyadh1.com", manager_first_name="Faisal")
        )

        sent = notifier.emails_to("principal@riyadh1.com")
        assert len(sent) == 1
        assert "school manager" in sent[0].body
        assert "Password:" in sent[0].body

    @pytest.mark.asyncio
    async def test_create_with_existing_manager(self, school_service, teacher, db_session, notifier):
        sent_before = len(notifier.emails)

        school = await school_service.create_school(
            school_request(
                school_unique_id="SCH-2",
                school_name="Jeddah-1",
                school_email="office@jeddah1.com",
                school_manager_id=teacher.user_id,
            )
        )

        assert school.school_manager_id == teacher.user_id
        assert await user_has_role(db_session, teacher.user_id, "school_manager")
        assert len(notifier.emails) == sent_before

    @pytest.mark.asyncio
    async def test_create_unknown_manager_fails(self, school_service, db_session):
        with pytest.raises(SchoolManagerNotFoundError):
            await school_service.create_school(school_request(school_manager_id=999))

        assert await count(db_session, select(func.count(School.id))) == 0

    @pytest.mark.asyncio
    async def test_create_duplicate_unique_id_fails(self, school_service, school):
        with pytest.raises(SchoolExistsError):
            await school_service.create_school(
                school_request(school_name="Other", school_email="other@riyadh1.com")
            )

    @pytest.mark.asyncio
    async def test_create_manager_email_taken_fails(self, school_service, teacher, db_session):
        with pytest.raises(ManagerEmailExistsError):
            await school_service.create_school(
                school_request(
                    school_unique_id="SCH-2",
                    school_name="Jeddah-1",
                    school_email="office@jeddah1.com",
                    manager_email="huda@teachers.com",
                )
            )

        assert await count(db_session, select(func.count(School.id))) == 1


class TestSchoolServiceRead:
    """Tests for school reads and updates."""

    @pytest.mark.asyncio
    async def test_get_school_by_id(self, school_service, school):
        result = await school_service.get_school_by_id(school.id)

        assert result.id == school.id
        assert result.manager is not None

    @pytest.mark.asyncio
    async def test_get_missing_school(self, school_service):
        with pytest.raises(SchoolNotFoundError):
            await school_service.get_school_by_id(42)

    @pytest.mark.asyncio
    async def test_get_all_schools(self, school_service, school):
        schools = await school_service.get_all_schools()

        assert [s.id for s in schools] == [school.id]

    @pytest.mark.asyncio
    async def test_update_school_fields(self, school_service, school):
        result = await school_service.update_school(
            school.id, SchoolUpdateRequest(school_city="Riyadh", status="INACTIVE")
        )

        assert result.school_city == "Riyadh"
        assert result.status == "INACTIVE"
        assert result.school_name == "Riyadh-1"

    @pytest.mark.asyncio
    async def test_update_to_duplicate_name_conflicts(self, school_service, school):
        other = await school_service.create_school(
            school_request(
                school_unique_id="SCH-2",
                school_name="Jeddah-1",
                school_email="office@jeddah1.com",
            )
        )

        with pytest.raises(SchoolExistsError):
            await school_service.update_school(other.id, SchoolUpdateRequest(school_name="Riyadh-1"))


class TestSchoolServiceDelete:
    """Tests for guarded school deletion."""

    @pytest.mark.asyncio
    async def test_delete_with_class_fails_and_keeps_everything(
        self, school_service, school, math_class, db_session
    ):
        with pytest.raises(SchoolHasDependentsError) as exc_info:
            await school_service.delete_school(school.id)

        assert "1 class(es)" in exc_info.value.message
        assert await db_session.get(School, school.id) is not None
        assert await db_session.get(Class, math_class.id) is not None
        assert await db_session.get(User, school.school_manager_id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_manager_account(self, school_service, school, db_session):
        manager_id = school.school_manager_id

        await school_service.delete_school(school.id)

        assert await count(db_session, select(func.count(School.id))) == 0
        assert await count(db_session, select(func.count(User.id)).where(User.id == manager_id)) == 0
        assert await count(
            db_session, select(func.count(UserProfile.id)).where(UserProfile.user_id == manager_id)
        ) == 0
        assert await count(
            db_session, select(func.count()).select_from(UserRole).where(UserRole.user_id == manager_id)
        ) == 0

    @pytest.mark.asyncio
    async def test_delete_keeps_manager_with_other_school(self, school_service, school, db_session):
        await school_service.create_school(
            school_request(
                school_unique_id="SCH-2",
                school_name="Jeddah-1",
                school_email="office@jeddah1.com",
                school_manager_id=school.school_manager_id,
            )
        )

        await school_service.delete_school(school.id)

        assert await db_session.get(User, school.school_manager_id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing_school(self, school_service):
        with pytest.raises(SchoolNotFoundError):
            await school_service.delete_school(42)


class TestSchoolUsers:
    """Tests for school user listings."""

    @pytest.mark.asyncio
    async def test_users_grouped_by_role(self, school_service, student_service, school, teacher):
        await student_service.create_student(
            student_request(
                school.id,
                parent_info=[ParentInfo(first_name="Omar", last_name="Ali", email="omar@parents.com")],
            )
        )

        grouped = await school_service.get_school_users_by_role(school.school_manager_id)

        assert grouped.school.id == school.id
        assert [u.email for u in grouped.teachers] == ["huda@teachers.com"]
        assert [u.email for u in grouped.students] == ["sara@students.com"]
        assert [u.email for u in grouped.parents] == ["omar@parents.com"]
        assert [u.id for u in grouped.managers] == [school.school_manager_id]

    @pytest.mark.asyncio
    async def test_users_by_role_requires_admin_row(self, school_service, teacher):
        with pytest.raises(SchoolAccessError):
            await school_service.get_school_users_by_role(teacher.user_id)

    @pytest.mark.asyncio
    async def test_all_users_by_school_id(self, school_service, school, teacher):
        users = await school_service.get_all_users_by_school_id(school.id)

        assert {u.user_id for u in users} == {school.school_manager_id, teacher.user_id}
