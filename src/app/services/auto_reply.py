"""Respostas automáticas a comandos de bot (!ping, !help, ...).

Comandos são comparados sem diferenciar maiúsculas. Respostas saem pelo
supervisor (request_send); fora de READY o comando é descartado.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.protocols.inbound_handler import InboundHandlerProtocol
from app.services.chat_ids import is_group_chat
from utils.errors import NotReadyError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.models import InboundMessage
    from app.supervisor import SessionSupervisor

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "🤖 *WhatsApp Bot Commands:*\n\n"
    "!ping - Test bot response\n"
    "!help - Show this help message\n"
    "!time - Get current time\n"
    "!info - Get your contact info\n"
    "!status - Get bot status"
)

COMMANDS = frozenset({"!ping", "!help", "!time", "!info", "!status"})


class AutoReplyService(InboundHandlerProtocol):
    """Responde comandos de bot recebidos em mensagens de texto.

    Args:
        supervisor: Supervisor usado para consultar estado e enviar
        email_configured: Se notificações por email estão configuradas
        clock: Relógio monotônico para uptime (injetável em testes)
    """

    name = "auto_reply"

    def __init__(
        self,
        supervisor: SessionSupervisor,
        *,
        email_configured: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._supervisor = supervisor
        self._email_configured = email_configured
        self._clock = clock
        self._started_at = clock()

    async def build_reply(self, message: InboundMessage) -> str | None:
        """Retorna o texto de resposta ou None se não for comando."""
        command = message.body.strip().lower()
        if command not in COMMANDS:
            return None
        if command == "!ping":
            return "🏓 Pong! Bot is active!"
        if command == "!help":
            return HELP_TEXT
        if command == "!time":
            return f"🕐 Current time: {datetime.now(UTC).strftime('%Y-%m-%d %H:%M:%S UTC')}"
        if command == "!status":
            return self._status_text()
        return await self._info_text(message)

    def _status_text(self) -> str:
        snapshot = self._supervisor.snapshot()
        uptime_minutes = int((self._clock() - self._started_at) // 60)
        return (
            "📊 *Bot Status:*\n"
            f"Ready: {'✅' if snapshot.is_ready else '❌'}\n"
            f"Phase: {snapshot.phase_name}\n"
            f"Uptime: {uptime_minutes} minutes\n"
            f"Email: {'✅ Configured' if self._email_configured else '❌ Not configured'}"
        )

    async def _info_text(self, message: InboundMessage) -> str:
        contact = await self._supervisor.get_contact_by_id(message.sender) or {}
        number = contact.get("number") or message.sender.split("@", 1)[0]
        return (
            "👤 *Your Info:*\n"
            f"Name: {contact.get('name') or 'Not saved'}\n"
            f"Number: {number}\n"
            f"Chat Type: {'Group' if is_group_chat(message.sender) else 'Individual'}"
        )

    async def handle(self, message: InboundMessage) -> None:
        try:
            reply = await self.build_reply(message)
            if reply is None:
                return
            await self._supervisor.request_send(message.sender, reply)
        except NotReadyError as exc:
            logger.info(
                "auto_reply_skipped",
                extra={"message_id": message.message_id, "phase": exc.phase},
            )
            return
        logger.info("auto_reply_sent", extra={"message_id": message.message_id})
