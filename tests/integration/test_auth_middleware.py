# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication middleware.

Tests the middleware components in isolation from database.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.api.middleware.auth import AuthMiddleware, get_current_user
from src.domains.auth.jwt import JWTManager


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


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuthMiddleware)

    @app.get("/api/v1/test")
    async def test_endpoint(request: Request) -> dict:
        user = get_current_user(request)
        if user is None:
            return {"user_id": None}
        return {"user_id": user.id, "is_admin": user.is_admin, "verified": user.is_verified}

    @app.get("/health")
    async def health(request: Request) -> dict:
        return {"user": get_current_user(request)}

    return app


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    @patch("src.api.middleware.auth.get_settings")
    def test_public_path_skips_token(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that public paths never decode the token."""
        mock_settings.return_value.jwt = jwt_settings
        token = jwt_manager.create_access_token(user_id=1, email="a@ehtimami.com")

        client = TestClient(build_app())
        response = client.get("/health", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"user": None}

    @patch("src.api.middleware.auth.get_settings")
    def test_valid_token_sets_user(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
        jwt_manager: JWTManager,
    ) -> None:
        """Test that valid token sets request.state.user."""
        mock_settings.return_value.jwt = jwt_settings
        token = jwt_manager.create_access_token(
            user_id=42,
            email="admin@ehtimami.com",
            roles=["admin"],
            is_verified=True,
        )

        client = TestClient(build_app())
        response = client.get("/api/v1/test", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"user_id": 42, "is_admin": True, "verified": True}

    @patch("src.api.middleware.auth.get_settings")
    def test_no_token_sets_user_none(
        self,
        mock_settings: MagicMock,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that missing token sets request.state.user to None."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        response = client.get("/api/v1/test")

        assert response.json()["user_id"] is None

    @pytest.mark.parametrize("header", ["Bearer invalid.token.here", "Token abc", "Bearer"])
    @patch("src.api.middleware.auth.get_settings")
    def test_bad_header_sets_user_none(
        self,
        mock_settings: MagicMock,
        header: str,
        jwt_settings: MagicMock,
    ) -> None:
        """Test that malformed or invalid tokens leave the request anonymous."""
        mock_settings.return_value.jwt = jwt_settings

        client = TestClient(build_app())
        response = client.get("/api/v1/test", headers={"Authorization": header})

        assert response.status_code == 200
        assert response.json()["user_id"] is None
