"""Settings do Firestore como backend do session store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: Projeto GCP (vazio = GCP_PROJECT ou credenciais padrão)
        collection_sessions: Collection com um documento por client_id
    """

    project_id: str = ""
    collection_sessions: str = "wa_sessions"

    def validate(self, gcp_project: str) -> list[str]:
        """Valida projeto e collection; gcp_project é o fallback do projeto."""
        errors: list[str] = []
        if not (self.project_id or gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        if not self.collection_sessions:
            errors.append("FIRESTORE_COLLECTION_SESSIONS não pode ser vazio")
        return errors


def _load_firestore_from_env() -> FirestoreSettings:
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_sessions=os.getenv("FIRESTORE_COLLECTION_SESSIONS", "wa_sessions"),
    )


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna instância cacheada de FirestoreSettings."""
    return _load_firestore_from_env()
