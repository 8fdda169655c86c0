"""Protocolo de persistência do session blob do cliente de transporte.

O blob é opaco para o gateway: serializado pelo transporte, apenas
guardado e devolvido pelo store, endereçado pelo client_id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

SessionBlob = str


class SessionStoreProtocol(ABC):
    """Contrato assíncrono para armazenamento do session blob."""

    @abstractmethod
    async def load(self, client_id: str) -> SessionBlob | None:
        """Retorna o blob salvo ou None se não existe.

        Raises:
            InfrastructureError: Se o backend estiver indisponível.
        """

    @abstractmethod
    async def save(self, client_id: str, blob: SessionBlob) -> bool:
        """Persiste o blob. Retorna False em falha (nunca levanta)."""

    @abstractmethod
    async def clear(self, client_id: str) -> None:
        """Remove o blob (credenciais invalidadas)."""

    async def close(self) -> None:  # noqa: B027
        """Libera conexões do backend (shutdown)."""

    async def ping(self) -> bool:
        """Verifica conectividade com o backend (health check). Nunca levanta."""
        return True
