"""Tests for the property application routes."""

import json

from conftest import APPLICANT_ID, OWNER_ID, application_row, auth_headers, property_row

APPLICATION = {"email": "applicant@example.com", "phone": "555-0100", "message": "Is it still available?"}


class TestSubmitApplication:
    """Tests for POST /properties/{id}/applications."""

    def test_submits_application(self, client, backend):
        backend.on("GET", "properties", [property_row()])
        backend.on("POST", "property_applications", [application_row(property=None)], status_code=201)

        r = client.post(
            "/api/v1/properties/prop-1/applications",
            json=APPLICATION,
            headers=auth_headers(APPLICANT_ID),
        )
        assert r.status_code == 201
        assert r.json()["status"] == "pending"

        [request] = backend.calls("POST", "property_applications")
        [row] = json.loads(request.content)
        assert row == {"property_id": "prop-1", "applicant_id": APPLICANT_ID, **APPLICATION}

    def test_owner_cannot_apply_to_own_property(self, client, backend):
        backend.on("GET", "properties", [property_row()])

        r = client.post(
            "/api/v1/properties/prop-1/applications",
            json=APPLICATION,
            headers=auth_headers(OWNER_ID),
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "You cannot apply to your own property"
        assert backend.calls("POST", "property_applications") == []

    def test_unknown_property(self, client, backend):
        backend.on("GET", "properties", [])

        r = client.post(
            "/api/v1/properties/nope/applications",
            json=APPLICATION,
            headers=auth_headers(APPLICANT_ID),
        )
        assert r.status_code == 404

    def test_invalid_email(self, client):
        r = client.post(
            "/api/v1/properties/prop-1/applications",
            json={**APPLICATION, "email": "not-an-email"},
            headers=auth_headers(APPLICANT_ID),
        )
        assert r.status_code == 422


class TestApplicationsOverview:
    """Tests for GET /applications."""

    def test_returns_sent_and_received(self, client, backend):
        def rows(request):
            if "applicant_id" in request.url.params:
                return [application_row(id="sent-1")]
            return [application_row(id="recv-1", applicant_id="someone-else")]

        backend.on("GET", "property_applications", rows)

        r = client.get("/api/v1/applications", headers=auth_headers(OWNER_ID))
        assert r.status_code == 200
        data = r.json()
        assert [a["id"] for a in data["sent"]] == ["sent-1"]
        assert [a["id"] for a in data["received"]] == ["recv-1"]
        assert data["received"][0]["property"]["address"] == "100 Main St, Springfield"

        sent_request, received_request = backend.calls("GET", "property_applications")
        assert sent_request.url.params["applicant_id"] == f"eq.{OWNER_ID}"
        assert received_request.url.params["property.owner_id"] == f"eq.{OWNER_ID}"
        assert received_request.url.params["order"] == "created_at.desc"

    def test_requires_authentication(self, client):
        r = client.get("/api/v1/applications")
        assert r.status_code in (401, 403)


class TestUpdateStatus:
    """Tests for PATCH /applications/{id}/status."""

    def test_approves_application(self, client, backend):
        backend.on("PATCH", "property_applications", [application_row(status="approved", property=None)])

        r = client.patch(
            "/api/v1/applications/app-1/status",
            json={"status": "approved"},
            headers=auth_headers(OWNER_ID),
        )
        assert r.status_code == 200
        assert r.json()["status"] == "approved"

        [request] = backend.calls("PATCH", "property_applications")
        assert request.url.params["id"] == "eq.app-1"
        assert json.loads(request.content) == {"status": "approved"}

    def test_no_row_updated_is_not_found(self, client, backend):
        backend.on("PATCH", "property_applications", [])

        r = client.patch(
            "/api/v1/applications/app-1/status",
            json={"status": "rejected"},
            headers=auth_headers(OWNER_ID),
        )
        assert r.status_code == 404

    def test_policy_rejection_is_forbidden(self, client, backend):
        backend.on("PATCH", "property_applications", {"message": "permission denied"}, status_code=403)

        r = client.patch(
            "/api/v1/applications/app-1/status",
            json={"status": "rejected"},
            headers=auth_headers(APPLICANT_ID),
        )
        assert r.status_code == 403
        assert r.json()["detail"] == "permission denied"

    def test_unknown_status(self, client):
        r = client.patch(
            "/api/v1/applications/app-1/status",
            json={"status": "maybe"},
            headers=auth_headers(OWNER_ID),
        )
        assert r.status_code == 422
