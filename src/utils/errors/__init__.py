"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthFailureError,
    FirestoreUnavailableError,
    GatewayError,
    InfrastructureError,
    InitializationError,
    NotificationFailure,
    NotReadyError,
    PairingRequiredError,
    RedisConnectionError,
    SupervisorStoppedError,
    TransportDisconnectedError,
    TransportError,
)

__all__ = [
    "AuthFailureError",
    "FirestoreUnavailableError",
    "GatewayError",
    "InfrastructureError",
    "InitializationError",
    "NotReadyError",
    "NotificationFailure",
    "PairingRequiredError",
    "RedisConnectionError",
    "SupervisorStoppedError",
    "TransportDisconnectedError",
    "TransportError",
]
