# tests/test_api.py
"""HTTP contracts: envelopes, status codes and error mapping."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import timedelta


def application(**overrides):
    body = {
        "first_name": "Sam", "last_name": "Okafor", "email": "sam@example.com",
        "license_plate": "7GHJ221", "state_province": "CA",
        "make": "Honda", "model": "Civic", "color": "Red",
    }
    body.update(overrides)
    return body


def ticket(**overrides):
    body = {
        "license_plate": "XYZ789", "state_province": "CA", "issued_by": "O1",
        "violation_type": "no_permit", "violation_reason": "No valid permit displayed",
        "fine_amount": 50.0,
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["database"] == "ok"


class TestPermitEndpoints:
    def test_permit_types(self, client):
        response = client.get("/api/permit-types")
        assert response.status_code == 200
        ids = {t["id"] for t in response.json()["data"]}
        assert ids == {"resident", "guest", "temporary", "commercial"}

    def test_submit_application_auto_approves_guest(self, client):
        response = client.post("/api/submit-permit-request", json=application())
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["auto_approved"] is True
        assert body["data"]["permit_request"]["status"] == "approved"

    def test_bad_window_is_400(self, client, clock):
        start = clock.now()
        response = client.post("/api/submit-permit-request", json=application(
            requested_start=start.isoformat(), requested_end=(start - timedelta(hours=1)).isoformat(),
        ))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "End date must be after start date"}

    def test_create_tenant_vehicle_and_request(self, client, clock):
        tenant = client.post("/api/tenants", json={
            "first_name": "Dana", "last_name": "Reyes", "email": "dana@example.com",
        }).json()["data"]
        vehicle = client.post(f"/api/tenants/{tenant['id']}/vehicles", json={
            "license_plate": "ABC123", "state_province": "CA", "make": "Toyota",
            "model": "Corolla", "color": "Blue",
        })
        assert vehicle.status_code == 201

        start = clock.now()
        response = client.post("/api/permit-requests", json={
            "vehicle_id": vehicle.json()["data"]["id"], "permit_type_id": "resident",
            "requested_start": start.isoformat(),
            "requested_end": (start + timedelta(days=365)).isoformat(),
        })
        assert response.status_code == 201
        assert response.json()["data"]["auto_approved"] is False

        queue = client.get("/api/permit-requests").json()["data"]
        assert len(queue) == 1
        listed = client.get(f"/api/tenants/{tenant['id']}/permit-requests").json()["data"]
        assert listed[0]["status"] == "pending"

    def test_duplicate_plate_is_409(self, client):
        client.post("/api/submit-permit-request", json=application())
        response = client.post("/api/submit-permit-request", json=application(email="other@example.com"))
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_public_plate_lookup_shows_registration_only(self, client, officers):
        client.post("/api/submit-permit-request", json=application())
        response = client.get("/api/license-plates/7ghj221", params={"state": "ca"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_registered"] is True
        assert data["tenant_info"]["name"] == "Sam Okafor"
        assert data["vehicle_info"]["state_province"] == "CA"
        assert len(data["active_permits"]) == 1
        assert len(data["permit_history"]) == 1
        assert "current_status" not in data
        scans = client.get("/api/enforcement/activities", params={"activity_type": "scan"}).json()["data"]
        assert scans == []

    def test_public_plate_lookup_unregistered(self, client):
        data = client.get("/api/license-plates/XYZ789").json()["data"]
        assert data["is_registered"] is False
        assert data["state_province"] == "CA"
        assert data["tenant_info"] is None
        assert data["active_permits"] == []

    def test_public_plate_lookup_bad_plate_is_400(self, client):
        assert client.get("/api/license-plates/NOT-A-PLATE").status_code == 400

    def test_unknown_tenant_is_404(self, client):
        assert client.get("/api/tenants/missing").status_code == 404


class TestEnforcementEndpoints:
    def test_lookup_unregistered_plate(self, client, officers):
        response = client.get("/api/enforcement/license-plates/xyz789", params={"officer_id": "O1"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_registered"] is False
        assert data["current_status"] == "no_permit"
        assert data["recommended_action"] == "warning"
        assert data["enforcement_context"]["violation_count_30_days"] == 0

    def test_lookup_authorized_plate(self, client, officers):
        client.post("/api/submit-permit-request", json=application())
        data = client.get("/api/enforcement/license-plates/7GHJ221", params={"state_province": "CA"}).json()["data"]
        assert data["current_status"] == "authorized"
        assert data["recommended_action"] == "none"
        assert len(data["active_permits"]) == 1
        assert data["tenant_info"]["name"] == "Sam Okafor"

    def test_lookup_accepts_state_synonym(self, client, officers):
        client.post("/api/submit-permit-request", json=application(state_province="NV"))
        url = "/api/enforcement/license-plates/7GHJ221"
        assert client.get(url, params={"state": "nv"}).json()["data"]["current_status"] == "authorized"
        assert client.get(url).json()["data"]["current_status"] == "no_permit"

    def test_lookup_reports_recent_violation_date(self, client, officers, clock):
        client.post("/api/enforcement/tickets", json=ticket())
        data = client.get("/api/enforcement/license-plates/XYZ789").json()["data"]
        context = data["enforcement_context"]
        assert context["violation_count_30_days"] == 1
        assert context["recent_violation_date"] == clock.now().isoformat()
        assert data["last_violation_date"] == context["recent_violation_date"]

    def test_ticket_then_duplicate_is_409(self, client, officers):
        first = client.post("/api/enforcement/tickets", json=ticket())
        assert first.status_code == 201
        assert first.json()["data"]["status"] == "issued"

        second = client.post("/api/enforcement/tickets", json=ticket())
        assert second.status_code == 409
        assert "Duplicate ticket" in second.json()["error"]

        other_officer = client.post("/api/enforcement/tickets", json=ticket(issued_by="O2"))
        assert other_officer.status_code == 201

    def test_invalid_plate_is_400_not_409(self, client, officers):
        response = client.post("/api/enforcement/tickets", json=ticket(license_plate="??"))
        assert response.status_code == 400

    def test_void_twice(self, client, officers):
        ticket_id = client.post("/api/enforcement/tickets", json=ticket()).json()["data"]["id"]
        url = f"/api/enforcement/tickets/{ticket_id}/void"
        assert client.put(url, json={"voided_reason": "Appeal"}).status_code == 200
        assert client.put(url, json={"voided_reason": "Appeal"}).status_code == 409

    def test_activity_summary(self, client, officers):
        client.post("/api/enforcement/activities", json={"officer_id": "O1", "activity_type": "patrol"})
        summary = client.get("/api/enforcement/activities/summary", params={"officer_id": "O1"}).json()["data"]
        assert summary["summary"]["total_patrols"] == 1


class TestShiftAndSyncEndpoints:
    def test_shift_cycle(self, client, officers):
        assert client.post("/api/enforcement/shifts/start", json={"officer_id": "O1"}).status_code == 201
        current = client.get("/api/enforcement/shifts/current", params={"officer_id": "O1"}).json()["data"]
        assert current["shift_end_time"] is None
        ended = client.post("/api/enforcement/shifts/end", json={"officer_id": "O1", "incidents": ["none"]})
        assert ended.status_code == 200
        assert ended.json()["data"]["incidents"] == ["none"]

    def test_queue_process_status(self, client, officers, clock):
        performed_at = (clock.now() - timedelta(minutes=15)).isoformat()
        queued = client.post("/api/enforcement/sync/queue", json={
            "officer_id": "O1", "action_type": "ticket", "performed_at": performed_at,
            "action_data": {"id": "t-1", "license_plate": "XYZ789", "state_province": "CA",
                            "violation_type": "no_permit", "violation_reason": "No permit"},
        })
        assert queued.status_code == 201

        processed = client.post("/api/enforcement/sync/process", json={"officer_id": "O1"}).json()["data"]
        assert processed["succeeded"] == 1
        assert processed["results"][0]["record_id"] == "t-1"

        status = client.get("/api/enforcement/sync/status", params={"officer_id": "O1"}).json()["data"]
        assert status["pending_actions"] == 0
        assert status["synced_actions"] == 1
