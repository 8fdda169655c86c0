"""Settings da superfície HTTP do gateway.

API key estática, rate limit global e limites das rotas de envio.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_RATE_LIMIT_WINDOW_MS = 15 * 60 * 1000
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100


@dataclass(frozen=True)
class GatewaySettings:
    """Configurações do gateway HTTP.

    Attributes:
        api_key: Chave exigida em /api/* (header x-api-key ou query api_key)
        rate_limit_window_ms: Janela fixa do rate limiter (ms)
        rate_limit_max_requests: Máximo de requisições por janela
        cors_origin: Origem permitida no CORS ("*" = qualquer)
        max_bulk_recipients: Máximo de destinatários em send-bulk
        bulk_default_delay_ms: Delay padrão entre mensagens do send-bulk
        trust_proxy: Rate limit por x-forwarded-for (apenas atrás de proxy confiável)
    """

    api_key: str = ""
    rate_limit_window_ms: int = DEFAULT_RATE_LIMIT_WINDOW_MS
    rate_limit_max_requests: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS
    cors_origin: str = "*"
    max_bulk_recipients: int = 100
    bulk_default_delay_ms: int = 2000
    trust_proxy: bool = False

    @property
    def rate_limit_window_seconds(self) -> float:
        """Janela do rate limiter em segundos."""
        return self.rate_limit_window_ms / 1000

    @property
    def cors_origins(self) -> list[str]:
        """Lista de origens para o CORSMiddleware."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    def validate(self, is_development: bool) -> list[str]:
        """Valida configurações do gateway.

        Args:
            is_development: True se ambiente de desenvolvimento.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.api_key and not is_development:
            errors.append("API_KEY obrigatória em staging/production")

        if self.rate_limit_window_ms <= 0:
            errors.append("RATE_LIMIT_WINDOW_MS deve ser > 0")

        if self.rate_limit_max_requests <= 0:
            errors.append("RATE_LIMIT_MAX_REQUESTS deve ser > 0")

        if self.max_bulk_recipients < 1:
            errors.append("MAX_BULK_RECIPIENTS deve ser >= 1")

        if self.bulk_default_delay_ms < 0:
            errors.append("BULK_DEFAULT_DELAY_MS deve ser >= 0")

        return errors


def _load_gateway_from_env() -> GatewaySettings:
    """Carrega GatewaySettings de variáveis de ambiente."""
    return GatewaySettings(
        api_key=os.getenv("API_KEY", ""),
        rate_limit_window_ms=int(
            os.getenv("RATE_LIMIT_WINDOW_MS", str(DEFAULT_RATE_LIMIT_WINDOW_MS))
        ),
        rate_limit_max_requests=int(
            os.getenv("RATE_LIMIT_MAX_REQUESTS", str(DEFAULT_RATE_LIMIT_MAX_REQUESTS))
        ),
        cors_origin=os.getenv("CORS_ORIGIN", "*"),
        max_bulk_recipients=int(os.getenv("MAX_BULK_RECIPIENTS", "100")),
        bulk_default_delay_ms=int(os.getenv("BULK_DEFAULT_DELAY_MS", "2000")),
        trust_proxy=os.getenv("TRUST_PROXY", "false").lower() in ("true", "1"),
    )


@lru_cache(maxsize=1)
def get_gateway_settings() -> GatewaySettings:
    """Retorna instância cacheada de GatewaySettings."""
    return _load_gateway_from_env()
