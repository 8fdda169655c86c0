"""Encaminha mensagens recebidas para um webhook HTTP externo."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.observability.metrics import record_latency
from app.protocols.inbound_handler import InboundHandlerProtocol

if TYPE_CHECKING:
    from app.protocols.models import InboundMessage
    from config.settings.webhook import WebhookSettings

logger = logging.getLogger(__name__)


class WebhookForwarder(InboundHandlerProtocol):
    """POST de {from, body, timestamp, id, type, hasMedia} para WEBHOOK_URL.

    Retry em 429/5xx pelo HttpClient; falha final é logada.
    """

    name = "webhook_forwarder"

    def __init__(self, settings: WebhookSettings, http_client: HttpClient | None = None) -> None:
        self._url = settings.url
        self._http = http_client or HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=settings.max_retries,
                backoff_base_seconds=1.0,
            )
        )

    async def handle(self, message: InboundMessage) -> None:
        start = time.perf_counter()
        try:
            response = await self._http.post(self._url, json=message.to_webhook_payload())
        except HttpError as exc:
            logger.warning(
                "webhook_forward_failed",
                extra={
                    "message_id": message.message_id,
                    "status_code": exc.status_code,
                    "error": str(exc),
                },
            )
            return
        record_latency("webhook", "forward", (time.perf_counter() - start) * 1000)
        if response.status_code >= 400:
            logger.warning(
                "webhook_forward_rejected",
                extra={"message_id": message.message_id, "status_code": response.status_code},
            )
            return
        logger.info(
            "webhook_forwarded",
            extra={"message_id": message.message_id, "status_code": response.status_code},
        )
