"""Settings do encaminhamento de mensagens recebidas para webhook externo."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do webhook de saída.

    Attributes:
        url: URL que recebe as mensagens (vazio = desativado)
        request_timeout_seconds: Timeout do POST
        max_retries: Tentativas extras em 429/5xx
    """

    url: str = ""
    request_timeout_seconds: float = 10.0
    max_retries: int = 2

    @property
    def enabled(self) -> bool:
        """Retorna True se o encaminhamento está ativo."""
        return bool(self.url)

    def validate(self) -> list[str]:
        """Valida configurações do webhook."""
        errors: list[str] = []
        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append(f"WEBHOOK_URL inválida: {self.url}")
        if self.request_timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")
        if self.max_retries < 0:
            errors.append("WEBHOOK_MAX_RETRIES deve ser >= 0")
        return errors


def _load_webhook_from_env() -> WebhookSettings:
    """Carrega WebhookSettings de variáveis de ambiente."""
    return WebhookSettings(
        url=os.getenv("WEBHOOK_URL", ""),
        request_timeout_seconds=float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("WEBHOOK_MAX_RETRIES", "2")),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhook_from_env()
