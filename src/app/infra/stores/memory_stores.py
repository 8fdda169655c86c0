"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import time

from app.protocols.session_store import SessionBlob, SessionStoreProtocol


class MemorySessionStore(SessionStoreProtocol):
    """Store de session blob em memória: apenas para dev/test.

    Args:
        ttl_seconds: Expiração dos blobs (0 = sem expiração)
    """

    def __init__(self, ttl_seconds: int = 0) -> None:
        self._store: dict[str, tuple[SessionBlob, float | None]] = {}  # client_id -> (blob, expires_at)
        self._ttl_seconds = ttl_seconds

    def _get(self, client_id: str) -> SessionBlob | None:
        entry = self._store.get(client_id)
        if entry is None:
            return None
        blob, expires_at = entry
        if expires_at is not None and time.time() > expires_at:
            del self._store[client_id]
            return None
        return blob

    async def load(self, client_id: str) -> SessionBlob | None:
        """Carrega blob da memória."""
        return self._get(client_id)

    async def save(self, client_id: str, blob: SessionBlob) -> bool:
        """Salva blob em memória."""
        expires_at = time.time() + self._ttl_seconds if self._ttl_seconds > 0 else None
        self._store[client_id] = (blob, expires_at)
        return True

    async def clear(self, client_id: str) -> None:
        """Remove blob da memória."""
        self._store.pop(client_id, None)

    def exists(self, client_id: str) -> bool:
        """Verifica se há blob salvo (apenas para testes)."""
        return self._get(client_id) is not None
