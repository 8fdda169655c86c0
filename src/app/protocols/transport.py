"""Protocolo do cliente de transporte (automação do WhatsApp Web).

O cliente é um recurso exclusivo do supervisor: apenas ele constrói e
destrói instâncias, via TransportFactory. Eventos de ciclo de vida são
entregues por um EventSink síncrono e não bloqueante.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.protocols.models import InboundMessage, OutboundPayload, SendResult
    from app.protocols.session_store import SessionBlob


class TransportEventKind(StrEnum):
    """Tipos de evento emitidos pelo transporte."""

    PAIRING_CHALLENGE = "pairing_challenge"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    AUTH_FAILURE = "auth_failure"
    DISCONNECTED = "disconnected"
    INITIALIZATION_ERROR = "initialization_error"
    MESSAGE_RECEIVED = "message_received"
    SESSION_SAVED = "session_saved"


@dataclass(frozen=True, slots=True)
class TransportEvent:
    """Evento emitido pelo cliente de transporte.

    Attributes:
        kind: Tipo do evento
        challenge: QR code (PAIRING_CHALLENGE)
        reason: Motivo (AUTH_FAILURE, DISCONNECTED, INITIALIZATION_ERROR)
        message: Mensagem recebida (MESSAGE_RECEIVED)
        blob: Session blob para persistir (SESSION_SAVED)
    """

    kind: TransportEventKind
    challenge: str | None = None
    reason: str | None = None
    message: InboundMessage | None = None
    blob: SessionBlob | None = None

    @classmethod
    def pairing(cls, challenge: str) -> TransportEvent:
        return cls(kind=TransportEventKind.PAIRING_CHALLENGE, challenge=challenge)

    @classmethod
    def failure(cls, kind: TransportEventKind, reason: str) -> TransportEvent:
        return cls(kind=kind, reason=reason)


EventSink = Callable[[TransportEvent], None]


class TransportClientProtocol(ABC):
    """Contrato do cliente de transporte."""

    @abstractmethod
    async def initialize(self) -> None:
        """Inicia o cliente. Eventos passam a ser emitidos no sink.

        Raises:
            Exception: Falha de construção (tratada como INITIALIZATION_ERROR).
        """

    @abstractmethod
    async def destroy(self) -> None:
        """Encerra o cliente e libera recursos. Deve ser idempotente."""

    @abstractmethod
    async def send_message(self, chat_id: str, payload: OutboundPayload) -> SendResult:
        """Envia mensagem para um chat."""

    @abstractmethod
    async def get_chats(self) -> list[dict[str, Any]]:
        """Lista chats conhecidos."""

    @abstractmethod
    async def get_chat_by_id(self, chat_id: str) -> dict[str, Any] | None:
        """Retorna dados de um chat ou None."""

    @abstractmethod
    async def get_contact_by_id(self, contact_id: str) -> dict[str, Any] | None:
        """Retorna dados de um contato ou None."""


# (client_id, blob restaurado, sink) -> cliente novo, ainda não inicializado
TransportFactory = Callable[[str, "SessionBlob | None", EventSink], TransportClientProtocol]
