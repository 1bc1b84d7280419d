# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for application wiring: health, envelopes and request ids."""

import pytest

from tests.integration.conftest import bearer, token_for


@pytest.mark.integration
class TestApplication:
    """Tests for cross-cutting application behaviour."""

    def test_root(self, client):
        response = client.get("/")

        assert response.json() == {"status": "success", "message": "Ehtimami API is running"}

    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_checks_database(self, client):
        response = client.get("/health/ready")

        body = response.json()
        assert response.status_code == 200
        assert body["components"]["database"]["status"] == "healthy"
        assert body["status"] in ("healthy", "degraded")

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        response = client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 32

    def test_expired_or_garbage_token_is_401(self, client):
        response = client.get(
            "/api/v1/classes", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nowhere", headers=bearer(token_for(1, ["admin"])))

        assert response.status_code == 404
        assert response.json()["status"] == "error"

    def test_roles_write_requires_admin(self, client):
        headers = bearer(token_for(3, ["teacher"]))

        response = client.post("/api/v1/roles/insert-role", json={"name": "x-role"}, headers=headers)

        assert response.status_code == 403
