"""
Integration tests for the report-created webhook.

The pipeline runs inline against the test database with the recording
push transport.
"""

import pytest

from backend.src.config.settings import get_settings
from backend.src.models.user import UserRole

WEBHOOK_URL = "/api/events/report-created"


@pytest.fixture
def webhook_headers():
    return {"X-Webhook-Secret": get_settings().event_webhook_secret}


class TestReportCreatedWebhook:
    """POST /api/events/report-created"""

    def test_dispatches_to_admins_and_managers(
        self, test_client, sample_user, recording_transport, webhook_headers
    ):
        sample_user(role=UserRole.ADMIN, tokens=["t1", "t2"])
        sample_user(role=UserRole.RSM, regions=["North"], tokens=["t3"])
        sample_user(role=UserRole.RSM, regions=["South"], tokens=["t9"])

        response = test_client.post(
            WEBHOOK_URL,
            json={
                "report_id": "R1",
                "submitted_by": "usr_someone",
                "submitted_by_name": "Ravi Kumar",
                "submitted_by_region": "North",
                "location_name": "ASC-7",
            },
            headers=webhook_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "dispatched"
        assert data["recipient_count"] == 2
        assert data["success_count"] == 3
        payload = recording_transport.payloads[0]
        assert sorted(payload.tokens) == ["t1", "t2", "t3"]
        assert payload.data_block()["url"].endswith("/dashboard/reports?view=R1")

    def test_no_recipients(self, test_client, recording_transport, webhook_headers):
        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": "usr_someone"},
            headers=webhook_headers,
        )

        assert response.json()["state"] == "no_recipients"
        assert recording_transport.call_count == 0

    def test_submitter_excluded(self, test_client, sample_user, recording_transport, webhook_headers):
        admin = sample_user(role=UserRole.ADMIN, tokens=["t1"])

        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": admin.guid},
            headers=webhook_headers,
        )

        assert response.json()["state"] == "no_tokens"
        assert recording_transport.call_count == 0

    def test_dispatch_failure_reported_not_raised(
        self, test_client, sample_user, recording_transport, webhook_headers
    ):
        sample_user(role=UserRole.ADMIN, tokens=["t1"])
        recording_transport.error = ConnectionError("network unreachable")

        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": "usr_someone"},
            headers=webhook_headers,
        )

        assert response.status_code == 200
        assert response.json()["state"] == "dispatch_failed"

    def test_bad_firebase_credentials_reported_not_raised(
        self, test_client, sample_user, webhook_headers, monkeypatch
    ):
        from backend.src.api.events import get_report_notification_service
        from backend.src.main import app

        sample_user(role=UserRole.ADMIN, tokens=["t1"])
        monkeypatch.setattr(
            get_settings(), "firebase_credentials_path", "/nonexistent/service-account.json"
        )
        # Real pipeline wiring, so the Firebase transport is built from settings
        app.dependency_overrides.pop(get_report_notification_service)

        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": "usr_someone"},
            headers=webhook_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "dispatch_failed"
        assert data["token_count"] == 1
        assert data["error"]

    def test_bad_secret(self, test_client):
        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": "usr_someone"},
            headers={"X-Webhook-Secret": "wrong"},
        )

        assert response.status_code == 401

    def test_missing_secret(self, test_client):
        response = test_client.post(
            WEBHOOK_URL, json={"report_id": "R1", "submitted_by": "usr_someone"}
        )

        assert response.status_code == 401

    def test_webhook_disabled(self, test_client, monkeypatch):
        monkeypatch.setattr(get_settings(), "event_webhook_secret", "")

        response = test_client.post(
            WEBHOOK_URL,
            json={"report_id": "R1", "submitted_by": "usr_someone"},
            headers={"X-Webhook-Secret": "anything"},
        )

        assert response.status_code == 503

    def test_invalid_payload(self, test_client, webhook_headers):
        response = test_client.post(
            WEBHOOK_URL, json={"report_id": ""}, headers=webhook_headers
        )

        assert response.status_code == 422
