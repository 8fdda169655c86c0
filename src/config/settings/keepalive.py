"""Settings do self-ping periódico (mantém instâncias free-tier acordadas)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_KEEPALIVE_INTERVAL_SECONDS = 14 * 60


@dataclass(frozen=True)
class KeepAliveSettings:
    """Configurações do keep-alive.

    Attributes:
        url: URL pública do serviço (vazio = desativado); /health é anexado
        interval_seconds: Intervalo entre pings
        request_timeout_seconds: Timeout de cada ping
    """

    url: str = ""
    interval_seconds: float = DEFAULT_KEEPALIVE_INTERVAL_SECONDS
    request_timeout_seconds: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def health_url(self) -> str:
        return f"{self.url.rstrip('/')}/health"

    def validate(self) -> list[str]:
        """Valida configurações do keep-alive."""
        errors: list[str] = []
        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append(f"KEEPALIVE_URL inválida: {self.url}")
        if self.interval_seconds <= 0:
            errors.append("KEEPALIVE_INTERVAL_SECONDS deve ser > 0")
        if self.request_timeout_seconds <= 0:
            errors.append("KEEPALIVE_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_keepalive_from_env() -> KeepAliveSettings:
    """Carrega KeepAliveSettings (RENDER_EXTERNAL_URL como fallback da URL)."""
    return KeepAliveSettings(
        url=os.getenv("KEEPALIVE_URL", os.getenv("RENDER_EXTERNAL_URL", "")),
        interval_seconds=float(
            os.getenv("KEEPALIVE_INTERVAL_SECONDS", str(DEFAULT_KEEPALIVE_INTERVAL_SECONDS))
        ),
        request_timeout_seconds=float(os.getenv("KEEPALIVE_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_keepalive_settings() -> KeepAliveSettings:
    """Retorna instância cacheada de KeepAliveSettings."""
    return _load_keepalive_from_env()
