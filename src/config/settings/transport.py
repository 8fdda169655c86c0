"""Settings do cliente de transporte (sidecar de automação do WhatsApp Web)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class TransportSettings:
    """Configurações do transporte via sidecar HTTP.

    Attributes:
        bridge_url: URL base do sidecar (ex: http://localhost:3001)
        request_timeout_seconds: Timeout das chamadas de comando
        poll_wait_seconds: Espera máxima de cada long-poll de eventos
        bridge_token: Token opcional enviado ao sidecar (Authorization: Bearer)
    """

    bridge_url: str = "http://localhost:3001"
    request_timeout_seconds: float = 30.0
    poll_wait_seconds: float = 25.0
    bridge_token: str = ""

    def validate(self) -> list[str]:
        """Valida configurações do transporte."""
        errors: list[str] = []

        if not self.bridge_url.startswith(("http://", "https://")):
            errors.append(f"TRANSPORT_BRIDGE_URL inválida: {self.bridge_url}")

        if self.request_timeout_seconds <= 0:
            errors.append("TRANSPORT_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.poll_wait_seconds <= 0:
            errors.append("TRANSPORT_POLL_WAIT_SECONDS deve ser > 0")

        return errors


def _load_transport_from_env() -> TransportSettings:
    """Carrega TransportSettings de variáveis de ambiente."""
    return TransportSettings(
        bridge_url=os.getenv("TRANSPORT_BRIDGE_URL", "http://localhost:3001").rstrip("/"),
        request_timeout_seconds=float(os.getenv("TRANSPORT_REQUEST_TIMEOUT_SECONDS", "30")),
        poll_wait_seconds=float(os.getenv("TRANSPORT_POLL_WAIT_SECONDS", "25")),
        bridge_token=os.getenv("TRANSPORT_BRIDGE_TOKEN", ""),
    )


@lru_cache(maxsize=1)
def get_transport_settings() -> TransportSettings:
    """Retorna instância cacheada de TransportSettings."""
    return _load_transport_from_env()
