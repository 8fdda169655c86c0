"""Redis Session Store: persistência do session blob no Redis.

Uma chave por client_id, com TTL opcional. Usa o cliente redis.asyncio
compartilhado criado no bootstrap.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.protocols.session_store import SessionBlob, SessionStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de sessões
SESSION_PREFIX = "wa_session:"


class RedisSessionStore(SessionStoreProtocol):
    """Store de session blob usando Redis.

    Args:
        redis_client: Cliente Redis assíncrono
        key_prefix: Prefixo das chaves
        ttl_seconds: Expiração do blob (0 = sem expiração)
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        key_prefix: str = SESSION_PREFIX,
        ttl_seconds: int = 0,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    def _key(self, client_id: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._prefix}{client_id}"

    async def load(self, client_id: str) -> SessionBlob | None:
        """Carrega blob do Redis.

        Raises:
            RedisConnectionError: Se o Redis estiver indisponível.
        """
        try:
            data = await self._redis.get(self._key(client_id))
        except RedisError as exc:
            raise RedisConnectionError(f"redis get falhou: {exc}") from exc
        if data is None:
            return None
        return data.decode("utf-8") if isinstance(data, bytes) else str(data)

    async def save(self, client_id: str, blob: SessionBlob) -> bool:
        """Salva blob no Redis (TTL se configurado)."""
        key = self._key(client_id)
        try:
            if self._ttl_seconds > 0:
                await self._redis.setex(key, self._ttl_seconds, blob)
            else:
                await self._redis.set(key, blob)
        except RedisError as exc:
            logger.warning(
                "session_save_error",
                extra={"client_id": client_id, "error_type": type(exc).__name__},
            )
            return False
        logger.debug("session_saved_redis", extra={"client_id": client_id, "ttl": self._ttl_seconds})
        return True

    async def clear(self, client_id: str) -> None:
        """Remove blob do Redis."""
        try:
            await self._redis.delete(self._key(client_id))
        except RedisError as exc:
            raise RedisConnectionError(f"redis delete falhou: {exc}") from exc

    async def ping(self) -> bool:
        """PING no Redis; False se indisponível."""
        try:
            return bool(await self._redis.ping())
        except RedisError as exc:
            logger.warning("session_store_ping_failed", extra={"error_type": type(exc).__name__})
            return False

    async def close(self) -> None:
        """Fecha o pool de conexões."""
        await self._redis.aclose()
