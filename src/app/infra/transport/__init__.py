"""Adapters do cliente de transporte."""

from app.infra.transport.bridge_client import (
    BridgeTransportClient,
    create_bridge_transport_factory,
    parse_bridge_event,
)

__all__ = [
    "BridgeTransportClient",
    "create_bridge_transport_factory",
    "parse_bridge_event",
]
