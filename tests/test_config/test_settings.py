"""Testes das settings do gateway (carregamento de env e validação)."""

from __future__ import annotations

import pytest

from config.settings import (
    BaseSettings,
    EmailSettings,
    GatewaySettings,
    KeepAliveSettings,
    SessionSettings,
    SupervisorSettings,
    TransportSettings,
    WebhookSettings,
)
from config.settings.base.core import _load_base_from_env
from config.settings.base.session import _load_session_from_env
from config.settings.email import _load_from_env as _load_email_from_env
from config.settings.gateway import _load_gateway_from_env
from config.settings.keepalive import _load_keepalive_from_env
from config.settings.supervisor import _load_supervisor_from_env
from config.settings.transport import _load_transport_from_env


class TestBaseSettings:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("STAGE", "staging"), ("qualquer", "development")],
    )
    def test_environment_aliases(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)

        assert _load_base_from_env().environment == expected

    def test_empty_service_name_is_invalid(self) -> None:
        assert BaseSettings(service_name="").validate() == ["SERVICE_NAME não pode ser vazio"]


class TestSessionSettings:
    def test_unknown_backend_falls_back_to_memory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_STORE_BACKEND", "sqlite")

        assert _load_session_from_env().store_backend == "memory"

    def test_redis_requires_url(self) -> None:
        errors = SessionSettings(store_backend="redis").validate(BaseSettings())

        assert errors == ["REDIS_URL obrigatório para SESSION_STORE_BACKEND=redis"]

    def test_memory_forbidden_outside_development(self) -> None:
        errors = SessionSettings().validate(BaseSettings(environment="staging"))

        assert errors == ["SESSION_STORE_BACKEND=memory proibido em staging/production"]


class TestGatewaySettings:
    def test_defaults(self) -> None:
        settings = GatewaySettings()

        assert settings.rate_limit_window_seconds == 900
        assert settings.rate_limit_max_requests == 100
        assert settings.cors_origins == ["*"]
        assert settings.trust_proxy is False

    def test_api_key_only_optional_in_development(self) -> None:
        assert GatewaySettings().validate(is_development=True) == []
        assert GatewaySettings().validate(is_development=False) == [
            "API_KEY obrigatória em staging/production"
        ]

    def test_loads_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_KEY", "k")
        monkeypatch.setenv("RATE_LIMIT_WINDOW_MS", "1000")
        monkeypatch.setenv("CORS_ORIGIN", "https://a.com, https://b.com")
        monkeypatch.setenv("TRUST_PROXY", "true")

        settings = _load_gateway_from_env()

        assert settings.api_key == "k"
        assert settings.rate_limit_window_seconds == 1
        assert settings.cors_origins == ["https://a.com", "https://b.com"]
        assert settings.trust_proxy is True


class TestSupervisorSettings:
    def test_defaults(self) -> None:
        settings = SupervisorSettings()

        assert settings.restart_delay_seconds == 30
        assert settings.init_retry_delay_seconds == 60
        assert settings.restart_cap_enabled

    def test_zero_disables_cap(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SUPERVISOR_MAX_RESTARTS", "0")

        settings = _load_supervisor_from_env()

        assert not settings.restart_cap_enabled
        assert settings.validate() == []

    def test_negative_values_are_invalid(self) -> None:
        errors = SupervisorSettings(restart_delay_seconds=-1, max_restarts=-1).validate()

        assert len(errors) == 2


class TestEmailSettings:
    def test_log_backend_needs_no_smtp(self) -> None:
        assert EmailSettings().validate() == []
        assert not EmailSettings().is_configured

    def test_email_backend_requires_host_and_recipient(self) -> None:
        errors = EmailSettings(notifier_backend="email").validate()

        assert "EMAIL_SMTP_HOST não configurado" in errors
        assert "NOTIFICATION_EMAIL não configurado" in errors

    def test_from_defaults_to_username(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("EMAIL_FROM", raising=False)
        monkeypatch.setenv("EMAIL_SMTP_USERNAME", "bot@local")

        assert _load_email_from_env().from_email == "bot@local"


class TestTransportAndWebhookSettings:
    def test_bridge_url_trailing_slash_is_removed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRANSPORT_BRIDGE_URL", "http://bridge:3001/")

        assert _load_transport_from_env().bridge_url == "http://bridge:3001"

    def test_invalid_bridge_url(self) -> None:
        assert TransportSettings(bridge_url="bridge:3001").validate() == [
            "TRANSPORT_BRIDGE_URL inválida: bridge:3001"
        ]

    def test_webhook_disabled_without_url(self) -> None:
        assert not WebhookSettings().enabled
        assert WebhookSettings(url="ftp://x").validate() == ["WEBHOOK_URL inválida: ftp://x"]


class TestKeepAliveSettings:
    def test_disabled_without_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("KEEPALIVE_URL", raising=False)
        monkeypatch.delenv("RENDER_EXTERNAL_URL", raising=False)

        settings = _load_keepalive_from_env()

        assert not settings.enabled
        assert settings.interval_seconds == 840
        assert settings.validate() == []

    def test_render_url_is_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("KEEPALIVE_URL", raising=False)
        monkeypatch.setenv("RENDER_EXTERNAL_URL", "https://gw.onrender.com/")

        settings = _load_keepalive_from_env()

        assert settings.enabled
        assert settings.health_url == "https://gw.onrender.com/health"

    def test_explicit_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KEEPALIVE_URL", "http://self.local")
        monkeypatch.setenv("RENDER_EXTERNAL_URL", "https://gw.onrender.com")

        assert _load_keepalive_from_env().health_url == "http://self.local/health"

    def test_invalid_values(self) -> None:
        errors = KeepAliveSettings(url="gw.local", interval_seconds=0).validate()

        assert errors == [
            "KEEPALIVE_URL inválida: gw.local",
            "KEEPALIVE_INTERVAL_SECONDS deve ser > 0",
        ]
