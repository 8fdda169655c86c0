"""Protocolos e contratos do core da aplicação."""

from .inbound_handler import InboundHandlerProtocol
from .models import InboundMessage, MediaAttachment, OutboundPayload, SendResult
from .notifier import NotifierProtocol
from .session_store import SessionBlob, SessionStoreProtocol
from .transport import (
    EventSink,
    TransportClientProtocol,
    TransportEvent,
    TransportEventKind,
    TransportFactory,
)

__all__ = [
    "EventSink",
    "InboundHandlerProtocol",
    "InboundMessage",
    "MediaAttachment",
    "NotifierProtocol",
    "OutboundPayload",
    "SendResult",
    "SessionBlob",
    "SessionStoreProtocol",
    "TransportClientProtocol",
    "TransportEvent",
    "TransportEventKind",
    "TransportFactory",
]
