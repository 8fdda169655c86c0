"""Modelos de fronteira entre supervisor, transporte e serviços.

Dataclasses imutáveis, sem dependência de framework.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem recebida pelo cliente de transporte.

    Attributes:
        sender: Chat id do remetente (ex: 5511999998888@c.us)
        body: Texto da mensagem
        message_id: Identificador da mensagem no serviço
        timestamp: Epoch em segundos informado pelo serviço
        message_type: Tipo da mensagem (chat, image, ...)
        has_media: Se a mensagem contém mídia
        from_me: Se foi enviada pela própria conta
        metadata: Campos extras do transporte
    """

    sender: str
    body: str
    message_id: str = ""
    timestamp: int = 0
    message_type: str = "chat"
    has_media: bool = False
    from_me: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_webhook_payload(self) -> dict[str, Any]:
        """Payload encaminhado ao webhook externo."""
        return {
            "from": self.sender,
            "body": self.body,
            "timestamp": self.timestamp,
            "id": self.message_id,
            "type": self.message_type,
            "hasMedia": self.has_media,
        }


@dataclass(frozen=True, slots=True)
class MediaAttachment:
    """Mídia em base64 para envio."""

    mimetype: str
    data: str
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class OutboundPayload:
    """Conteúdo de uma mensagem de saída (texto ou mídia com legenda)."""

    text: str | None = None
    media: MediaAttachment | None = None

    def __post_init__(self) -> None:
        if not self.text and self.media is None:
            raise ValueError("OutboundPayload requer text ou media")

    def to_dict(self) -> dict[str, Any]:
        """Representação enviada ao transporte."""
        data: dict[str, Any] = {}
        if self.media is not None:
            data["media"] = {
                "mimetype": self.media.mimetype,
                "data": self.media.data,
                "filename": self.media.filename,
            }
            if self.text:
                data["caption"] = self.text
        else:
            data["text"] = self.text
        return data


@dataclass(frozen=True, slots=True)
class SendResult:
    """Resultado de um envio aceito pelo transporte."""

    message_id: str
    timestamp: int = 0
