"""Cliente de transporte via sidecar HTTP de automação do WhatsApp Web.

O sidecar (processo Node com o navegador automatizado) expõe:
    POST   /sessions/{id}                 inicia sessão (body: {"session": blob})
    GET    /sessions/{id}/events?cursor=  long-poll de eventos
    DELETE /sessions/{id}                 encerra sessão e navegador
    POST   /sessions/{id}/messages        envia mensagem
    GET    /sessions/{id}/chats[/{chat}]  lista/consulta chats
    GET    /sessions/{id}/contacts/{id}   consulta contato

Eventos do sidecar são traduzidos para TransportEvent e entregues ao sink
do supervisor. Falha do pump de eventos vira INITIALIZATION_ERROR.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.protocols.models import InboundMessage, SendResult
from app.protocols.transport import (
    TransportClientProtocol,
    TransportEvent,
    TransportEventKind,
)
from utils.errors import TransportError

if TYPE_CHECKING:
    from app.protocols.models import OutboundPayload
    from app.protocols.session_store import SessionBlob
    from app.protocols.transport import EventSink, TransportFactory
    from config.settings.transport import TransportSettings

logger = logging.getLogger(__name__)


def parse_bridge_event(raw: dict[str, Any]) -> TransportEvent | None:
    """Traduz evento do sidecar para TransportEvent (None = ignorado)."""
    kind = raw.get("type")
    if kind == "qr":
        return TransportEvent.pairing(str(raw.get("qr", "")))
    if kind == "authenticated":
        return TransportEvent(kind=TransportEventKind.AUTHENTICATED)
    if kind == "ready":
        return TransportEvent(kind=TransportEventKind.READY)
    if kind == "auth_failure":
        return TransportEvent.failure(
            TransportEventKind.AUTH_FAILURE, str(raw.get("message") or "auth_failure")
        )
    if kind == "disconnected":
        return TransportEvent.failure(
            TransportEventKind.DISCONNECTED, str(raw.get("reason") or "unknown")
        )
    if kind == "remote_session_saved":
        blob = raw.get("session")
        if not isinstance(blob, str):
            return None
        return TransportEvent(kind=TransportEventKind.SESSION_SAVED, blob=blob)
    if kind == "message":
        data = raw.get("message") or {}
        return TransportEvent(
            kind=TransportEventKind.MESSAGE_RECEIVED,
            message=InboundMessage(
                sender=str(data.get("from", "")),
                body=str(data.get("body", "")),
                message_id=str(data.get("id", "")),
                timestamp=int(data.get("timestamp") or 0),
                message_type=str(data.get("type", "chat")),
                has_media=bool(data.get("hasMedia", False)),
                from_me=bool(data.get("fromMe", False)),
            ),
        )
    return None


class BridgeTransportClient(TransportClientProtocol):
    """TransportClient que conversa com o sidecar via httpx.

    Args:
        client_id: Identificador da sessão no sidecar
        session_blob: Sessão restaurada do store (None = novo pareamento)
        sink: Destino dos eventos (supervisor)
        settings: URL, timeouts e token do sidecar
        http_client: AsyncClient injetável (testes); senão um próprio
    """

    def __init__(
        self,
        client_id: str,
        session_blob: SessionBlob | None,
        sink: EventSink,
        *,
        settings: TransportSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client_id = client_id
        self._session_blob = session_blob
        self._sink = sink
        self._settings = settings
        headers = {"Authorization": f"Bearer {settings.bridge_token}"} if settings.bridge_token else {}
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=settings.bridge_url,
            headers=headers,
            timeout=settings.request_timeout_seconds,
        )
        self._commands = HttpClient(
            HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=1,
                backoff_base_seconds=1.0,
            ),
            client=self._http,
        )
        self._cursor: int | str | None = None
        self._pump_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def _base_path(self) -> str:
        return f"/sessions/{self._client_id}"

    async def initialize(self) -> None:
        """Cria a sessão no sidecar e inicia o pump de eventos."""
        try:
            response = await self._commands.request(
                "POST", self._base_path, json={"session": self._session_blob}
            )
        except HttpError as exc:
            raise TransportError(f"bridge indisponível: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(f"bridge recusou sessão (status={response.status_code})")

        self._pump_task = asyncio.create_task(
            self._pump(), name=f"bridge_pump:{self._client_id}"
        )
        logger.info(
            "bridge_session_started",
            extra={"client_id": self._client_id, "session_restored": self._session_blob is not None},
        )

    async def _poll_once(self) -> None:
        params: dict[str, Any] = {"wait": self._settings.poll_wait_seconds}
        if self._cursor is not None:
            params["cursor"] = self._cursor
        response = await self._http.get(
            f"{self._base_path}/events",
            params=params,
            timeout=self._settings.poll_wait_seconds + self._settings.request_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
        self._cursor = data.get("cursor", self._cursor)
        for raw in data.get("events", []):
            try:
                event = parse_bridge_event(raw)
            except (AttributeError, TypeError, ValueError) as exc:
                # Evento malformado é descartado; não derruba o pump
                logger.warning(
                    "bridge_event_invalid",
                    extra={
                        "client_id": self._client_id,
                        "type": raw.get("type") if isinstance(raw, dict) else None,
                        "error_type": type(exc).__name__,
                    },
                )
                continue
            if event is None:
                logger.debug("bridge_event_ignored", extra={"type": raw.get("type")})
                continue
            self._sink(event)

    async def _pump(self) -> None:
        try:
            while not self._closed:
                await self._poll_once()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if self._closed:
                return
            logger.error(
                "bridge_event_pump_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )
            self._sink(
                TransportEvent.failure(
                    TransportEventKind.INITIALIZATION_ERROR, f"event pump: {exc}"
                )
            )

    async def destroy(self) -> None:
        """Para o pump, encerra a sessão no sidecar e fecha o AsyncClient."""
        if self._closed:
            return
        self._closed = True

        if self._pump_task is not None and not self._pump_task.done():
            self._pump_task.cancel()
            await asyncio.gather(self._pump_task, return_exceptions=True)

        try:
            await self._http.delete(self._base_path)
        except httpx.HTTPError as exc:
            logger.warning(
                "bridge_session_delete_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )
        finally:
            if self._owns_http:
                await self._http.aclose()

    async def send_message(self, chat_id: str, payload: OutboundPayload) -> SendResult:
        try:
            response = await self._commands.request(
                "POST",
                f"{self._base_path}/messages",
                json={"chatId": chat_id, **payload.to_dict()},
                max_retries=0,
            )
        except HttpError as exc:
            raise TransportError(f"envio falhou: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(f"envio recusado (status={response.status_code})")
        data = response.json()
        return SendResult(
            message_id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp") or 0),
        )

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self._commands.request("GET", path)
        except HttpError as exc:
            raise TransportError(f"consulta falhou: {exc}") from exc
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise TransportError(f"consulta recusada (status={response.status_code})")
        return response.json()

    async def get_chats(self) -> list[dict[str, Any]]:
        data = await self._get_json(f"{self._base_path}/chats")
        return list(data or [])

    async def get_chat_by_id(self, chat_id: str) -> dict[str, Any] | None:
        return await self._get_json(f"{self._base_path}/chats/{chat_id}")

    async def get_contact_by_id(self, contact_id: str) -> dict[str, Any] | None:
        return await self._get_json(f"{self._base_path}/contacts/{contact_id}")


def create_bridge_transport_factory(
    settings: TransportSettings,
    http_client_factory: Any = None,
) -> TransportFactory:
    """Factory de BridgeTransportClient para o supervisor.

    Args:
        settings: Configurações do sidecar
        http_client_factory: Callable opcional que cria o AsyncClient (testes)
    """

    def _factory(
        client_id: str, session_blob: SessionBlob | None, sink: EventSink
    ) -> TransportClientProtocol:
        http_client = http_client_factory() if http_client_factory is not None else None
        return BridgeTransportClient(
            client_id,
            session_blob,
            sink,
            settings=settings,
            http_client=http_client,
        )

    return _factory
