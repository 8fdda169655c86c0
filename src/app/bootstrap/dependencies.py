"""Composition root do gateway: notifier, transporte e supervisor.

Conecta implementações concretas aos protocolos consumidos pelo
SessionSupervisor. Nenhum módulo fora de app/bootstrap instancia infra.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.dependencies_stores import create_session_store
from app.infra.notifications import (
    CompositeNotifier,
    EmailNotifier,
    LogNotifier,
    WebhookForwarder,
)
from app.infra.transport import create_bridge_transport_factory
from app.services.auto_reply import AutoReplyService
from app.supervisor import RestartPolicy, SessionSupervisor
from config.settings import (
    get_email_settings,
    get_session_settings,
    get_supervisor_settings,
    get_transport_settings,
    get_webhook_settings,
)

if TYPE_CHECKING:
    from app.protocols.notifier import NotifierProtocol
    from app.protocols.session_store import SessionStoreProtocol
    from app.protocols.transport import TransportFactory

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Notifier
# ──────────────────────────────────────────────────────────────────────────────


def create_notifier() -> NotifierProtocol:
    """Cria notifier conforme NOTIFIER_BACKEND.

    "email" combina EmailNotifier com LogNotifier para que o evento
    continue visível nos logs mesmo com falha de SMTP.
    """
    settings = get_email_settings()
    if settings.notifier_backend == "email":
        logger.info("notifier_created", extra={"backend": "email"})
        return CompositeNotifier([LogNotifier(), EmailNotifier(settings)])

    logger.info("notifier_created", extra={"backend": "log"})
    return LogNotifier()


# ──────────────────────────────────────────────────────────────────────────────
# Transporte
# ──────────────────────────────────────────────────────────────────────────────


def create_transport_factory() -> TransportFactory:
    """Cria factory de clientes do sidecar WhatsApp Web."""
    settings = get_transport_settings()
    logger.info("transport_factory_created", extra={"backend": "bridge"})
    return create_bridge_transport_factory(settings)


# ──────────────────────────────────────────────────────────────────────────────
# Supervisor
# ──────────────────────────────────────────────────────────────────────────────


def create_supervisor(
    *,
    session_store: SessionStoreProtocol | None = None,
    notifier: NotifierProtocol | None = None,
    transport_factory: TransportFactory | None = None,
) -> SessionSupervisor:
    """Monta o SessionSupervisor com handlers de mensagens recebidas.

    Dependências não informadas são criadas a partir do ambiente.
    """
    supervisor = SessionSupervisor(
        client_id=get_session_settings().client_id,
        transport_factory=transport_factory or create_transport_factory(),
        session_store=session_store or create_session_store(),
        notifier=notifier or create_notifier(),
        restart_policy=RestartPolicy.from_settings(get_supervisor_settings()),
    )

    webhook_settings = get_webhook_settings()
    if webhook_settings.enabled:
        supervisor.add_inbound_handler(WebhookForwarder(webhook_settings))

    supervisor.add_inbound_handler(
        AutoReplyService(
            supervisor,
            email_configured=get_email_settings().is_configured,
        )
    )

    logger.info(
        "supervisor_created",
        extra={
            "client_id": supervisor.client_id,
            "webhook_enabled": webhook_settings.enabled,
        },
    )
    return supervisor
