"""Testes das rotas /api/* com TestClient (sem lifespan)."""

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from config.settings import EmailSettings, GatewaySettings
from fsm.states import ConnectionPhase
from tests.fakes.fake_transport import RecordingNotifier
from tests.fakes.stub_supervisor import StubSupervisor

API_KEY = "test-key"
HEADERS = {"x-api-key": API_KEY}
EMAIL_SETTINGS = EmailSettings(notification_email="ops@local")


@pytest.fixture
def supervisor() -> StubSupervisor:
    return StubSupervisor()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(supervisor: StubSupervisor, notifier: RecordingNotifier) -> TestClient:
    app = create_app(
        supervisor=supervisor,
        gateway_settings=GatewaySettings(
            api_key=API_KEY, max_bulk_recipients=3, bulk_default_delay_ms=0
        ),
        email_settings=EMAIL_SETTINGS,
        email_notifier=notifier,
    )
    return TestClient(app)


class TestApiKey:
    def test_missing_key_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/status")

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing API key"}

    def test_wrong_key_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/status", headers={"x-api-key": "nope"})

        assert response.status_code == 401

    def test_key_in_query_string(self, client: TestClient) -> None:
        response = client.get("/api/status", params={"api_key": API_KEY})

        assert response.status_code == 200

    def test_health_does_not_require_key(self, client: TestClient) -> None:
        assert client.get("/health").status_code == 200


class TestQrAndStatus:
    def test_qr_when_ready(self, client: TestClient) -> None:
        response = client.get("/api/qr", headers=HEADERS)

        assert response.json() == {"message": "Client is already authenticated"}

    def test_qr_not_available(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.phase = ConnectionPhase.STARTING

        response = client.get("/api/qr", headers=HEADERS)

        assert response.json()["message"] == "QR code not available yet. Please wait..."
        assert response.json()["phase"] == "Starting"

    def test_qr_returns_challenge(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.phase = ConnectionPhase.AWAITING_PAIRING
        supervisor.pairing_challenge = "2@qr"

        response = client.get("/api/qr", headers=HEADERS)

        assert response.json() == {"qr": "2@qr"}

    def test_qr_email_resends_challenge(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        supervisor.phase = ConnectionPhase.AWAITING_PAIRING
        supervisor.pairing_challenge = "2@qr"

        response = client.get("/api/qr-email", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {
            "message": "QR code sent to email successfully",
            "email": "ops@local",
        }
        assert supervisor.resent == ["2@qr"]

    def test_qr_email_notification_failure_is_500(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        supervisor.phase = ConnectionPhase.AWAITING_PAIRING
        supervisor.pairing_challenge = "2@qr"
        supervisor.resend_error = RuntimeError("smtp down")

        response = client.get("/api/qr-email", headers=HEADERS)

        assert response.status_code == 500
        assert response.json() == {"error": "smtp down"}

    def test_status_snapshot(self, client: TestClient) -> None:
        data = client.get("/api/status", headers=HEADERS).json()

        assert data["phase"] == "Ready"
        assert data["ready"] is True
        assert data["has_qr_code"] is False
        assert "timestamp" in data


class TestSendMessage:
    def test_sends_to_normalized_chat_id(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        response = client.post(
            "/api/send-message",
            headers=HEADERS,
            json={"to": "+55 11 99999-8888", "message": "oi"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["messageId"] == "msg-1"
        assert data["to"] == "5511999998888@c.us"
        assert supervisor.sent[0][0] == "5511999998888@c.us"

    def test_not_ready_is_503_with_phase(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        supervisor.phase = ConnectionPhase.DISCONNECTED

        response = client.post(
            "/api/send-message", headers=HEADERS, json={"to": "5511999998888", "message": "oi"}
        )

        assert response.status_code == 503
        assert response.json() == {"error": "WhatsApp client is not ready", "phase": "Disconnected"}
        assert supervisor.sent == []

    def test_missing_fields_is_400(self, client: TestClient) -> None:
        response = client.post("/api/send-message", headers=HEADERS, json={"to": "5511"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_invalid_number_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/send-message", headers=HEADERS, json={"to": "abc", "message": "oi"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "número inválido"}

    def test_transport_error_is_500(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.fail_for = {"5511999998888@c.us"}

        response = client.post(
            "/api/send-message", headers=HEADERS, json={"to": "5511999998888", "message": "oi"}
        )

        assert response.status_code == 500
        assert "envio recusado" in response.json()["error"]


class TestSendBulk:
    def test_reports_per_recipient(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.fail_for = {"5511922222222@c.us"}

        response = client.post(
            "/api/send-bulk",
            headers=HEADERS,
            json={"recipients": ["5511911111111", "5511922222222"], "message": "promo", "delay": 0},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["total"] == 2
        assert data["successful"] == 1
        assert data["failed"] == 1

    def test_too_many_recipients(self, client: TestClient) -> None:
        response = client.post(
            "/api/send-bulk",
            headers=HEADERS,
            json={"recipients": ["1", "2", "3", "4"], "message": "promo"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Maximum 3 recipients per request"}

    def test_empty_recipients_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/send-bulk", headers=HEADERS, json={"recipients": [], "message": "promo"}
        )

        assert response.status_code == 400


class TestSendMedia:
    def test_sends_media_with_caption(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        data = base64.b64encode(b"\x89PNG").decode()

        response = client.post(
            "/api/send-media",
            headers=HEADERS,
            json={
                "to": "5511999998888",
                "data": data,
                "mimetype": "image/png",
                "filename": "a.png",
                "caption": "foto",
            },
        )

        assert response.status_code == 200
        assert response.json()["mediaType"] == "image/png"
        payload = supervisor.sent[0][1]
        assert payload.text == "foto"
        assert payload.media is not None
        assert payload.media.data == data

    def test_invalid_base64_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/send-media",
            headers=HEADERS,
            json={"to": "5511999998888", "data": "***", "mimetype": "image/png"},
        )

        assert response.status_code == 400


class TestQueries:
    def test_chats(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.chats = [{"id": "1@c.us"}, {"id": "2@c.us"}]

        data = client.get("/api/chats", headers=HEADERS).json()

        assert data == {"success": True, "chats": supervisor.chats, "total": 2}

    def test_contact_found(self, client: TestClient, supervisor: StubSupervisor) -> None:
        supervisor.contacts["5511999998888@c.us"] = {"name": "Ana"}

        response = client.get("/api/contact/5511999998888", headers=HEADERS)

        assert response.json() == {"success": True, "contact": {"name": "Ana"}}

    def test_contact_not_found(self, client: TestClient) -> None:
        response = client.get("/api/contact/5511999998888", headers=HEADERS)

        assert response.status_code == 404
        assert response.json() == {"error": "Contact not found"}


class TestOperations:
    def test_restart(self, client: TestClient, supervisor: StubSupervisor) -> None:
        response = client.post("/api/restart", headers=HEADERS)

        assert response.json() == {"success": True, "message": "Client restart initiated"}
        assert supervisor.restarts == 1

    def test_restart_without_running_supervisor(
        self, client: TestClient, supervisor: StubSupervisor
    ) -> None:
        supervisor.running = False

        response = client.post("/api/restart", headers=HEADERS)

        assert response.status_code == 503

    def test_test_email(self, client: TestClient, notifier: RecordingNotifier) -> None:
        response = client.post("/api/test-email", headers=HEADERS)

        assert response.json() == {
            "success": True,
            "message": "Test email sent successfully",
            "sentTo": "ops@local",
        }
        assert notifier.calls == [("test", None)]

    def test_test_email_failure(self, client: TestClient, notifier: RecordingNotifier) -> None:
        notifier.fail_on = {"test"}

        response = client.post("/api/test-email", headers=HEADERS)

        assert response.status_code == 500
        assert response.json()["error"] == "Email test failed"
