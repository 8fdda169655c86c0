"""Notifier que apenas registra eventos em log (default em desenvolvimento)."""

from __future__ import annotations

import logging

from app.protocols.notifier import NotifierProtocol

logger = logging.getLogger(__name__)


class LogNotifier(NotifierProtocol):
    """Registra notificações como logs estruturados. O QR nunca é logado."""

    async def on_pairing_challenge(self, challenge: str) -> None:
        logger.warning(
            "operator_pairing_required",
            extra={"challenge_length": len(challenge)},
        )

    async def on_ready(self) -> None:
        logger.info("operator_client_ready")

    async def on_disconnected(self, reason: str) -> None:
        logger.warning("operator_client_disconnected", extra={"reason": reason})

    async def send_test(self) -> None:
        logger.info("operator_test_notification")
