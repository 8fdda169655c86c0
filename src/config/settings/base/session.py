"""Settings de sessão do cliente de transporte.

Configurações do identificador do cliente e do backend que persiste
o material de autenticação (session blob) entre restarts.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

SessionStoreBackend = Literal["memory", "redis", "firestore"]


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        client_id: Identificador do cliente (chave no session store)
        store_backend: Backend para armazenamento do session blob
        ttl_seconds: TTL do blob no Redis (0 = sem expiração)
        redis_key_prefix: Prefixo das chaves no Redis
    """

    client_id: str = "default"
    store_backend: SessionStoreBackend = "memory"
    ttl_seconds: int = 0
    redis_key_prefix: str = "wa_session:"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de sessão.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.client_id:
            errors.append("SESSION_CLIENT_ID não pode ser vazio")

        if self.ttl_seconds < 0:
            errors.append("SESSION_TTL_SECONDS deve ser >= 0")

        valid_backends = {"memory", "redis", "firestore"}
        if self.store_backend not in valid_backends:
            errors.append(f"SESSION_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("SESSION_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL obrigatório para SESSION_STORE_BACKEND=redis")

        return errors


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    backend_str = os.getenv("SESSION_STORE_BACKEND", "memory").lower()
    backend: SessionStoreBackend = (
        backend_str if backend_str in ("memory", "redis", "firestore") else "memory"
    )
    return SessionSettings(
        client_id=os.getenv("SESSION_CLIENT_ID", "default"),
        store_backend=backend,
        ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", "0")),
        redis_key_prefix=os.getenv("SESSION_REDIS_KEY_PREFIX", "wa_session:"),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
