"""Protocolo de notificações ao operador (best-effort)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class NotifierProtocol(ABC):
    """Notificações fora de banda do ciclo de vida da conexão.

    Implementações podem levantar exceções; o supervisor as contém na
    fronteira (safe_notify) e nunca deixa uma falha afetar transições.
    """

    @abstractmethod
    async def on_pairing_challenge(self, challenge: str) -> None:
        """QR code emitido ou renovado."""

    @abstractmethod
    async def on_ready(self) -> None:
        """Cliente conectado e pronto."""

    @abstractmethod
    async def on_disconnected(self, reason: str) -> None:
        """Queda, falha de autenticação ou limite de restarts atingido."""

    async def send_test(self) -> None:  # noqa: B027
        """Envia notificação de teste (verificação de configuração)."""
