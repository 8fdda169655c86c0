"""Testes do composition root (session store, notifier e supervisor)."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from app.bootstrap import (
    collect_settings_errors,
    create_notifier,
    create_session_store,
    create_supervisor,
    validate_runtime_settings,
)
from app.bootstrap import dependencies_stores
from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.notifications import CompositeNotifier, LogNotifier, WebhookForwarder
from app.infra.stores import FirestoreSessionStore, MemorySessionStore, RedisSessionStore
from app.services import AutoReplyService
from config.settings import (
    SessionSettings,
    get_base_settings,
    get_email_settings,
    get_firestore_settings,
    get_gateway_settings,
    get_session_settings,
    get_supervisor_settings,
    get_transport_settings,
    get_webhook_settings,
)
from tests.fakes.fake_transport import FakeTransportRegistry, RecordingNotifier

_CACHED = (
    get_base_settings,
    get_email_settings,
    get_firestore_settings,
    get_gateway_settings,
    get_session_settings,
    get_supervisor_settings,
    get_transport_settings,
    get_webhook_settings,
    create_async_redis_client,
    create_firestore_client,
)


@pytest.fixture(autouse=True)
def _clear_caches() -> Iterator[None]:
    for getter in _CACHED:
        getter.cache_clear()
    yield
    for getter in _CACHED:
        getter.cache_clear()


class TestCreateSessionStore:
    def test_memory_is_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SESSION_STORE_BACKEND", raising=False)

        assert isinstance(create_session_store(), MemorySessionStore)

    def test_redis_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

        store = create_session_store(SessionSettings(store_backend="redis"))

        assert isinstance(store, RedisSessionStore)

    def test_redis_without_url_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REDIS_URL", raising=False)

        with pytest.raises(ValueError, match="REDIS_URL"):
            create_session_store(SessionSettings(store_backend="redis"))

    def test_firestore_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(dependencies_stores, "create_firestore_client", MagicMock)

        store = create_session_store(SessionSettings(store_backend="firestore"))

        assert isinstance(store, FirestoreSessionStore)

    def test_unknown_backend_raises(self) -> None:
        settings = SessionSettings(store_backend="sqlite")  # type: ignore[arg-type]

        with pytest.raises(ValueError, match="SESSION_STORE_BACKEND"):
            create_session_store(settings)


class TestCreateNotifier:
    def test_log_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTIFIER_BACKEND", "log")

        assert isinstance(create_notifier(), LogNotifier)

    def test_email_backend_keeps_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTIFIER_BACKEND", "email")

        assert isinstance(create_notifier(), CompositeNotifier)


class TestCreateSupervisor:
    def test_wires_auto_reply_and_webhook(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_CLIENT_ID", "loja-1")
        monkeypatch.setenv("WEBHOOK_URL", "http://hook.local/in")

        supervisor = create_supervisor(
            session_store=MemorySessionStore(),
            notifier=RecordingNotifier(),
            transport_factory=FakeTransportRegistry(),
        )

        assert supervisor.client_id == "loja-1"
        kinds = [type(h) for h in supervisor._inbound_handlers]
        assert kinds == [WebhookForwarder, AutoReplyService]
        assert not supervisor.is_running

    def test_webhook_disabled_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WEBHOOK_URL", raising=False)

        supervisor = create_supervisor(
            session_store=MemorySessionStore(),
            notifier=RecordingNotifier(),
            transport_factory=FakeTransportRegistry(),
        )

        assert [type(h) for h in supervisor._inbound_handlers] == [AutoReplyService]


class TestRuntimeValidation:
    def test_production_requires_api_key_and_durable_store(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.setenv("SESSION_STORE_BACKEND", "memory")

        errors = collect_settings_errors()

        assert "gateway: API_KEY obrigatória em staging/production" in errors
        assert any(e.startswith("session: SESSION_STORE_BACKEND=memory") for e in errors)
        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            validate_runtime_settings()

    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("EMAIL_SMTP_PORT", "587")
        monkeypatch.setenv("NOTIFIER_BACKEND", "email")
        monkeypatch.delenv("EMAIL_SMTP_HOST", raising=False)

        assert "email: EMAIL_SMTP_HOST não configurado" in collect_settings_errors()
        validate_runtime_settings()

    def test_firestore_errors_only_for_firestore_backend(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("SESSION_STORE_BACKEND", "firestore")
        monkeypatch.delenv("FIRESTORE_PROJECT_ID", raising=False)
        monkeypatch.delenv("GCP_PROJECT", raising=False)
        monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)

        errors = collect_settings_errors()

        assert any(e.startswith("firestore:") for e in errors)
