"""Protocolo para handlers de mensagens recebidas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.models import InboundMessage


class InboundHandlerProtocol(ABC):
    """Handler disparado (fire-and-forget) para cada mensagem recebida."""

    name: str = "inbound_handler"

    @abstractmethod
    async def handle(self, message: InboundMessage) -> None:
        """Processa a mensagem. Exceções são logadas pelo supervisor."""
