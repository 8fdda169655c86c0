"""Notifier por email (SMTP).

Envio síncrono via smtplib executado em thread (asyncio.to_thread) para
não bloquear o event loop. Corpo em texto simples.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from datetime import UTC, datetime
from email.message import EmailMessage
from typing import TYPE_CHECKING

from app.protocols.notifier import NotifierProtocol
from utils.errors import NotificationFailure

if TYPE_CHECKING:
    from config.settings.email import EmailSettings

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "[WhatsApp Gateway]"


class EmailNotifier(NotifierProtocol):
    """Envia notificações do ciclo de vida ao email do operador.

    Args:
        settings: Configuração SMTP e destinatário
        smtp_factory: Construtor de conexão SMTP (injetável em testes)
    """

    def __init__(
        self,
        settings: EmailSettings,
        smtp_factory: type[smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self._settings = settings
        self._smtp_factory = smtp_factory

    def _build_message(self, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"{SUBJECT_PREFIX} {subject}"
        message["From"] = self._settings.from_email or self._settings.smtp_username
        message["To"] = self._settings.notification_email
        message.set_content(body)
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        settings = self._settings
        with self._smtp_factory(
            settings.smtp_host,
            settings.smtp_port,
            timeout=settings.request_timeout_seconds,
        ) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(message)

    async def _send(self, subject: str, body: str) -> None:
        if not self._settings.is_configured:
            raise NotificationFailure("SMTP não configurado (EMAIL_SMTP_HOST/NOTIFICATION_EMAIL)")
        message = self._build_message(subject, body)
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationFailure(f"envio SMTP falhou: {type(exc).__name__}") from exc
        logger.info("email_notification_sent", extra={"subject": subject})

    async def on_pairing_challenge(self, challenge: str) -> None:
        await self._send(
            "QR code para conectar",
            "Escaneie o QR code abaixo no WhatsApp (Aparelhos conectados).\n"
            "Conteúdo do QR (gere a imagem com qualquer leitor):\n\n"
            f"{challenge}\n\n"
            f"Gerado em {datetime.now(UTC).isoformat()}",
        )

    async def on_ready(self) -> None:
        await self._send(
            "Cliente conectado",
            f"O cliente WhatsApp está pronto desde {datetime.now(UTC).isoformat()}.",
        )

    async def on_disconnected(self, reason: str) -> None:
        await self._send(
            "Cliente desconectado",
            f"O cliente WhatsApp desconectou.\nMotivo: {reason}\n"
            f"Horário: {datetime.now(UTC).isoformat()}",
        )

    async def send_test(self) -> None:
        await self._send(
            "Email de teste",
            "Configuração SMTP verificada com sucesso.",
        )
