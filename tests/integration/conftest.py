# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API tests.

Each test gets a fresh application whose lifespan builds an in-memory
database, seeds the built-in roles and the admin account, and starts the
stub task broker.
"""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_notifier
from src.core.config import get_settings
from src.domains.auth.jwt import JWTManager
from tests.factories import school_payload

ADMIN_EMAIL = "admin@ehtimami.com"
ADMIN_PASSWORD = "admin-secret-1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_for(
    user_id: int,
    roles: list[str],
    is_verified: bool = True,
    email: str = "someone@ehtimami.com",
) -> str:
    """Sign a token directly, without a matching account."""
    return JWTManager(get_settings().jwt).create_access_token(
        user_id=user_id,
        email=email,
        roles=roles,
        is_verified=is_verified,
    )


@pytest.fixture
def app(notifier) -> FastAPI:
    app = create_app()
    app.dependency_overrides[get_notifier] = lambda: notifier
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    """Authorization header of the seeded admin."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return bearer(response.json()["data"]["access_token"])


@pytest.fixture
def school(client: TestClient, admin_headers: dict[str, str]) -> dict:
    """Riyadh-1 created through the API."""
    response = client.post(
        "/api/v1/schools/create-new-school",
        json=school_payload(),
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
