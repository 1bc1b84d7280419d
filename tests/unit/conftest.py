# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Service fixtures for unit tests that need existing schools, teachers and classes."""

import pytest_asyncio

from src.domains.class_.service import ClassService
from src.domains.school.service import SchoolService
from src.domains.student.service import StudentService
from src.domains.teacher.service import TeacherService
from src.models.school import SchoolResponse
from src.models.teacher import TeacherRegisterRequest
from tests.factories import class_request, school_request


@pytest_asyncio.fixture
async def school_service(db_session, notifier) -> SchoolService:
    return SchoolService(db_session, notifier)


@pytest_asyncio.fixture
async def class_service(db_session) -> ClassService:
    return ClassService(db_session)


@pytest_asyncio.fixture
async def student_service(db_session, notifier) -> StudentService:
    return StudentService(db_session, notifier)


@pytest_asyncio.fixture
async def teacher_service(db_session, notifier) -> TeacherService:
    return TeacherService(db_session, notifier)


@pytest_asyncio.fixture
async def school(school_service) -> SchoolResponse:
    """A school whose manager account was created alongside it."""
    return await school_service.create_school(school_request())


@pytest_asyncio.fixture
async def teacher(teacher_service, school):
    """A teacher registered in the school fixture."""
    return await teacher_service.register_teacher(
        TeacherRegisterRequest(
            first_name="Huda",
            last_name="Saleh",
            email="huda@teachers.com",
            school_id=school.id,
        )
    )


@pytest_asyncio.fixture
async def math_class(class_service, school):
    """MATH101 with a Monday session only."""
    return await class_service.create_class(class_request(school.id))
