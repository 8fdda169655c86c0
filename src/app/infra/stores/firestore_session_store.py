"""Firestore Session Store: persistência do session blob no Firestore.

Um documento por client_id. O SDK Python do Firestore é síncrono, então
as chamadas rodam via asyncio.to_thread para não bloquear o event loop.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.protocols.session_store import SessionBlob, SessionStoreProtocol
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

# Collection padrão para sessões
SESSIONS_COLLECTION = "wa_sessions"

# Documento lido pelo health check (não precisa existir)
PING_DOCUMENT = "_health"


class FirestoreSessionStore(SessionStoreProtocol):
    """Store de session blob usando Firestore.

    Documento: {collection}/{client_id} = {"session": blob, "updated_at": ts}

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = SESSIONS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    def _doc(self, client_id: str):  # noqa: ANN202
        return self._db.collection(self._collection).document(client_id)

    def _load_sync(self, client_id: str) -> SessionBlob | None:
        snapshot = self._doc(client_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        blob = data.get("session")
        return blob if isinstance(blob, str) else None

    def _save_sync(self, client_id: str, blob: SessionBlob) -> None:
        self._doc(client_id).set({"session": blob, "updated_at": datetime.now(UTC)})

    async def load(self, client_id: str) -> SessionBlob | None:
        """Carrega blob do Firestore.

        Raises:
            FirestoreUnavailableError: Se o Firestore estiver indisponível.
        """
        try:
            return await asyncio.to_thread(self._load_sync, client_id)
        except Exception as exc:
            raise FirestoreUnavailableError(f"firestore get falhou: {exc}") from exc

    async def save(self, client_id: str, blob: SessionBlob) -> bool:
        """Salva blob no Firestore."""
        try:
            await asyncio.to_thread(self._save_sync, client_id, blob)
        except Exception as exc:
            logger.warning(
                "session_save_error",
                extra={"client_id": client_id, "error_type": type(exc).__name__},
            )
            return False
        logger.debug("session_saved_firestore", extra={"client_id": client_id})
        return True

    async def clear(self, client_id: str) -> None:
        """Remove o documento da sessão."""
        try:
            await asyncio.to_thread(self._doc(client_id).delete)
        except Exception as exc:
            raise FirestoreUnavailableError(f"firestore delete falhou: {exc}") from exc

    async def ping(self) -> bool:
        """Leitura de um documento sentinela; False se o Firestore falhar."""
        try:
            await asyncio.to_thread(self._doc(PING_DOCUMENT).get)
        except Exception as exc:
            logger.warning("session_store_ping_failed", extra={"error_type": type(exc).__name__})
            return False
        return True

    async def close(self) -> None:
        """Fecha o cliente Firestore."""
        await asyncio.to_thread(self._db.close)
