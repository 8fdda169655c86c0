"""Notifiers e handlers de saída."""

from app.infra.notifications.composite import CompositeNotifier
from app.infra.notifications.email_notifier import EmailNotifier
from app.infra.notifications.log_notifier import LogNotifier
from app.infra.notifications.webhook_forwarder import WebhookForwarder

__all__ = [
    "CompositeNotifier",
    "EmailNotifier",
    "LogNotifier",
    "WebhookForwarder",
]
