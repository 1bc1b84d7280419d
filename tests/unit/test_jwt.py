# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities.

Tests the JWTManager class and token operations.
"""

import time
from unittest.mock import MagicMock

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_create_access_token_returns_valid_token(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that create_access_token returns valid token string."""
        token = jwt_manager.create_access_token(user_id=7, email="huda@teachers.com")

        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_access_token_returns_payload(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that decode_token returns the claims that were encoded."""
        token = jwt_manager.create_access_token(
            user_id=7,
            email="huda@teachers.com",
            roles=["teacher", "parent"],
            is_verified=True,
            first_name="Huda",
            last_name="Saleh",
        )

        payload = jwt_manager.decode_token(token)

        assert isinstance(payload, TokenPayload)
        assert payload.sub == "7"
        assert payload.user_id == 7
        assert payload.type == "access"
        assert payload.email == "huda@teachers.com"
        assert payload.roles == ["teacher", "parent"]
        assert payload.is_verified is True
        assert payload.first_name == "Huda"
        assert payload.last_name == "Saleh"

    def test_optional_fields_default(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that optional claims have safe defaults."""
        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")
        payload = jwt_manager.decode_token(token)

        assert payload.roles == []
        assert payload.is_verified is False
        assert payload.first_name is None

    def test_decode_expired_token_raises_error(
        self,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that decode_token raises error for expired token."""
        jwt_settings.access_token_expire_minutes = -1
        jwt_manager = JWTManager(jwt_settings)

        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")

        with pytest.raises(TokenExpiredError, match="Token has expired"):
            jwt_manager.decode_token(token)

    def test_decode_invalid_token_raises_error(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that decode_token raises error for invalid token."""
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("invalid.token.here")

    def test_decode_token_with_wrong_secret_raises_error(
        self,
        jwt_manager: JWTManager,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that decode fails when secret doesn't match."""
        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")

        other_settings = MagicMock()
        other_settings.secret_key = SecretStr("different-secret-key")
        other_settings.algorithm = "HS256"
        other_manager = JWTManager(other_settings)

        with pytest.raises(InvalidTokenError):
            other_manager.decode_token(token)

    def test_decode_non_access_token_raises_error(
        self,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens of another type are rejected."""
        now = int(time.time())
        token = jwt.encode(
            {"sub": "1", "type": "refresh", "email": "a@ehtimami.com",
             "exp": now + 60, "iat": now, "jti": "x"},
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            jwt_manager.decode_token(token)

    def test_decode_non_numeric_subject_raises_error(
        self,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that a subject that is not a user id is rejected."""
        now = int(time.time())
        token = jwt.encode(
            {"sub": "abc", "type": "access", "email": "a@ehtimami.com",
             "exp": now + 60, "iat": now, "jti": "x"},
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_verify_token(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that verify_token reports validity without raising."""
        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")

        assert jwt_manager.verify_token(token) is True
        assert jwt_manager.verify_token("invalid.token.here") is False

    def test_tokens_contain_unique_jti(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens contain unique JTI claims."""
        payload1 = jwt_manager.decode_token(
            jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")
        )
        payload2 = jwt_manager.decode_token(
            jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")
        )

        assert payload1.jti != payload2.jti

    def test_token_payload_timestamps(
        self,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that tokens have correct iat and exp timestamps."""
        before = int(time.time())

        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")

        after = int(time.time())
        payload = jwt_manager.decode_token(token)

        assert before <= payload.iat <= after
        assert abs(payload.exp - (payload.iat + 30 * 60)) <= 1
        assert jwt_manager.expires_in == 30 * 60
