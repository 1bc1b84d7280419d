# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for User service."""

import pytest
import pytest_asyncio

from src.domains.user.service import PhoneInUseError, UserNotFoundError, UserService
from src.models.user import UserProfileUpdateRequest


@pytest_asyncio.fixture
async def user_service(db_session) -> UserService:
    return UserService(db_session)


class TestUserService:
    """Tests for user reads, verification and profile updates."""

    @pytest.mark.asyncio
    async def test_get_all_users(self, user_service, school, teacher):
        users = await user_service.get_all_users()

        assert [u.user_id for u in users] == [school.school_manager_id, teacher.user_id]

    @pytest.mark.asyncio
    async def test_get_user_by_id_includes_school(self, user_service, teacher, school):
        user = await user_service.get_user_by_id(teacher.user_id)

        assert user.email == "huda@teachers.com"
        assert user.roles == ["teacher"]
        assert user.school.id == school.id
        assert user.profile is not None

    @pytest.mark.asyncio
    async def test_get_missing_user(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.get_user_by_id(404)

    @pytest.mark.asyncio
    async def test_get_by_profile_id(self, user_service, teacher):
        profile_id = teacher.profile.profile_id

        user = await user_service.get_user_by_profile_id(profile_id)

        assert user.user_id == teacher.user_id

        with pytest.raises(UserNotFoundError):
            await user_service.get_user_by_profile_id(profile_id + 100)

    @pytest.mark.asyncio
    async def test_verify_and_unverify(self, user_service, teacher):
        verified = await user_service.verify_user_by_id(teacher.user_id)
        assert verified.is_verified is True

        unverified = await user_service.verify_user_by_id(teacher.user_id, is_verified=False)
        assert unverified.is_verified is False

    @pytest.mark.asyncio
    async def test_verify_missing_user(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.verify_user_by_id(404)

    @pytest.mark.asyncio
    async def test_update_profile(self, user_service, teacher):
        result = await user_service.update_user_profile(
            teacher.user_id,
            UserProfileUpdateRequest(first_name="Hoda", phone="0501112222", bio="Math lead"),
        )

        assert result.first_name == "Hoda"
        assert result.last_name == "Saleh"
        assert result.phone == "0501112222"
        assert result.profile.bio == "Math lead"
        assert result.profile.nationality == "Unknown"

    @pytest.mark.asyncio
    async def test_update_profile_phone_taken(self, user_service, teacher, school):
        await user_service.update_user_profile(
            school.school_manager_id, UserProfileUpdateRequest(phone="0509998888")
        )

        with pytest.raises(PhoneInUseError):
            await user_service.update_user_profile(
                teacher.user_id, UserProfileUpdateRequest(phone="0509998888")
            )
