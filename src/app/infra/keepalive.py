"""Self-ping periódico em GET {url}/health.

Hosts free-tier suspendem instâncias sem tráfego; o ping mantém o
processo (e a sessão WhatsApp) vivo. Falhas são apenas logadas.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    from config.settings.keepalive import KeepAliveSettings

logger = logging.getLogger(__name__)


class KeepAlivePinger:
    """Executa o ping em loop até ser cancelado.

    Args:
        settings: URL e intervalo
        http_client: HttpClient (injetável em testes)
        sleep: Função de espera (injetável em testes)
    """

    def __init__(
        self,
        settings: KeepAliveSettings,
        http_client: HttpClient | None = None,
        sleep: Any = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._http = http_client or HttpClient(
            HttpClientConfig(timeout_seconds=settings.request_timeout_seconds, max_retries=0)
        )
        self._sleep = sleep

    async def ping_once(self) -> bool:
        url = self._settings.health_url
        try:
            response = await self._http.request("GET", url, max_retries=0)
        except (HttpError, httpx.HTTPError) as exc:
            logger.warning(
                "keepalive_ping_failed",
                extra={"url": url, "error_type": type(exc).__name__, "error": str(exc)},
            )
            return False
        if response.status_code >= 400:
            logger.warning(
                "keepalive_ping_failed",
                extra={"url": url, "status_code": response.status_code},
            )
            return False
        logger.info("keepalive_ping_ok", extra={"url": url, "status_code": response.status_code})
        return True

    async def run(self) -> None:
        logger.info(
            "keepalive_started",
            extra={"url": self._settings.health_url, "interval_seconds": self._settings.interval_seconds},
        )
        while True:
            await self._sleep(self._settings.interval_seconds)
            await self.ping_once()


def start_keepalive(settings: KeepAliveSettings) -> asyncio.Task[None] | None:
    """Agenda o loop de ping se houver URL configurada."""
    if not settings.enabled:
        return None
    return asyncio.create_task(KeepAlivePinger(settings).run(), name="keepalive")


async def stop_keepalive(task: asyncio.Task[None] | None) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
