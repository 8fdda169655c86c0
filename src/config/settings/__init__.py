"""Settings do gateway, uma dataclass congelada por domínio.

Cada módulo expõe `get_*_settings()` (cacheado, lido do ambiente) e
`validate()`; o bootstrap agrega os erros no startup.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    SessionSettings,
    SessionStoreBackend,
    get_base_settings,
    get_session_settings,
)
from config.settings.email import EmailSettings, NotifierBackend, get_email_settings
from config.settings.firestore import FirestoreSettings, get_firestore_settings
from config.settings.gateway import GatewaySettings, get_gateway_settings
from config.settings.keepalive import KeepAliveSettings, get_keepalive_settings
from config.settings.supervisor import SupervisorSettings, get_supervisor_settings
from config.settings.transport import TransportSettings, get_transport_settings
from config.settings.webhook import WebhookSettings, get_webhook_settings

__all__ = [
    "BaseSettings",
    "EmailSettings",
    "Environment",
    "FirestoreSettings",
    "GatewaySettings",
    "KeepAliveSettings",
    "NotifierBackend",
    "SessionSettings",
    "SessionStoreBackend",
    "SupervisorSettings",
    "TransportSettings",
    "WebhookSettings",
    "get_base_settings",
    "get_email_settings",
    "get_firestore_settings",
    "get_gateway_settings",
    "get_keepalive_settings",
    "get_session_settings",
    "get_supervisor_settings",
    "get_transport_settings",
    "get_webhook_settings",
]
