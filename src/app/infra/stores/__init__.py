"""Stores: implementações concretas de persistência do session blob.

Módulos disponíveis:
    - redis_session_store: Store de sessão usando Redis
    - firestore_session_store: Store de sessão usando Firestore
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_session_store import FirestoreSessionStore
from app.infra.stores.memory_stores import MemorySessionStore
from app.infra.stores.redis_session_store import RedisSessionStore

__all__ = [
    # Firestore
    "FirestoreSessionStore",
    # Memory (dev/test)
    "MemorySessionStore",
    # Redis
    "RedisSessionStore",
]
