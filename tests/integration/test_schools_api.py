# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Schools API endpoints."""

import pytest

from tests.factories import class_payload, school_payload
from tests.integration.conftest import bearer, token_for


@pytest.mark.integration
class TestSchoolsAPI:
    """Tests for school endpoints."""

    def test_create_school_creates_manager(self, school, notifier):
        assert school["school_unique_id"] == "SCH-1"
        assert school["manager"]["email"] == "office@riyadh1.com"
        assert len(notifier.emails_to("office@riyadh1.com")) == 1

    def test_create_requires_token(self, client):
        response = client.post("/api/v1/schools/create-new-school", json=school_payload())

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json() == {"status": "error", "message": "Not authenticated"}

    def test_create_requires_admin(self, client):
        headers = bearer(token_for(5, ["teacher"]))

        response = client.post(
            "/api/v1/schools/create-new-school", json=school_payload(), headers=headers
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"

    def test_duplicate_school_conflicts(self, client, admin_headers, school):
        response = client.post(
            "/api/v1/schools/create-new-school",
            json=school_payload(school_email="other@riyadh1.com"),
            headers=admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["status"] == "error"

    def test_get_and_list(self, client, admin_headers, school):
        one = client.get(f"/api/v1/schools/{school['id']}", headers=admin_headers)
        listed = client.get("/api/v1/schools/get-all-schools", headers=admin_headers)

        assert one.json()["data"]["school_name"] == "Riyadh-1"
        assert [s["id"] for s in listed.json()["data"]] == [school["id"]]

    def test_missing_school_is_404(self, client, admin_headers):
        response = client.get("/api/v1/schools/999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["status"] == "error"

    def test_delete_blocked_by_class(self, client, admin_headers, school):
        created = client.post(
            "/api/v1/classes/create-new-class",
            json=class_payload(school["id"]),
            headers=admin_headers,
        )
        assert created.status_code == 201, created.text

        response = client.delete(f"/api/v1/schools/{school['id']}", headers=admin_headers)

        assert response.status_code == 400
        assert "class" in response.json()["message"]
        assert client.get(f"/api/v1/schools/{school['id']}", headers=admin_headers).status_code == 200

    def test_delete_school(self, client, admin_headers, school):
        response = client.delete(f"/api/v1/schools/{school['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "School deleted successfully.",
            "data": None,
        }
        manager = client.get(
            f"/api/v1/users/{school['school_manager_id']}", headers=admin_headers
        )
        assert manager.status_code == 404

    def test_manager_sees_only_own_school(self, client, school):
        manager_id = school["school_manager_id"]
        own = bearer(token_for(manager_id, ["school_manager"]))

        allowed = client.get(f"/api/v1/schools/manager/{manager_id}/users", headers=own)
        denied = client.get(f"/api/v1/schools/manager/{manager_id + 1}/users", headers=own)

        assert allowed.status_code == 200
        assert [m["id"] for m in allowed.json()["data"]["managers"]] == [manager_id]
        assert denied.status_code == 403

    def test_manager_users_requires_role(self, client, school):
        headers = bearer(token_for(school["school_manager_id"], ["teacher"]))

        response = client.get(
            f"/api/v1/schools/manager/{school['school_manager_id']}/users", headers=headers
        )

        assert response.status_code == 403
