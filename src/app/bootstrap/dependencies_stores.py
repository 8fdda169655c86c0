"""Factory do session store baseada em configuração de ambiente."""

from __future__ import annotations

import logging

from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.stores import FirestoreSessionStore, MemorySessionStore, RedisSessionStore
from app.protocols.session_store import SessionStoreProtocol
from config.settings import (
    SessionSettings,
    get_base_settings,
    get_firestore_settings,
    get_session_settings,
)

logger = logging.getLogger(__name__)


def create_session_store(settings: SessionSettings | None = None) -> SessionStoreProtocol:
    """Cria store de sessão conforme SESSION_STORE_BACKEND.

    - "memory": MemorySessionStore (dev/test)
    - "redis": RedisSessionStore
    - "firestore": FirestoreSessionStore

    Raises:
        ValueError: Backend desconhecido ou REDIS_URL ausente
    """
    settings = settings or get_session_settings()
    backend = settings.store_backend

    if backend == "redis":
        store: SessionStoreProtocol = RedisSessionStore(
            create_async_redis_client(),
            key_prefix=settings.redis_key_prefix,
            ttl_seconds=settings.ttl_seconds,
        )
        logger.info("session_store_created", extra={"backend": "redis"})
        return store

    if backend == "firestore":
        store = FirestoreSessionStore(
            create_firestore_client(),
            collection_name=get_firestore_settings().collection_sessions,
        )
        logger.info("session_store_created", extra={"backend": "firestore"})
        return store

    if backend == "memory":
        environment = get_base_settings().environment
        if environment != "development":
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        store = MemorySessionStore(ttl_seconds=settings.ttl_seconds)
        logger.info("session_store_created", extra={"backend": "memory"})
        return store

    msg = f"SESSION_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)
