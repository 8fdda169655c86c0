"""Envio sequencial para vários destinatários (send-bulk).

O delay entre mensagens pertence a esta camada; o supervisor não
enfileira nem agenda envios.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.services.chat_ids import to_chat_id
from config.logging import mask_identifier
from utils.errors import GatewayError, NotReadyError

if TYPE_CHECKING:
    from app.protocols.models import OutboundPayload
    from app.supervisor import SessionSupervisor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecipientResult:
    to: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"to": self.to, "success": self.success}
        if self.message_id is not None:
            data["messageId"] = self.message_id
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(slots=True)
class BulkSendReport:
    results: list[RecipientResult] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.successful

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total": len(self.results),
            "successful": self.successful,
            "failed": self.failed,
        }


async def send_bulk(
    supervisor: SessionSupervisor,
    numbers: list[str],
    payload: OutboundPayload,
    *,
    delay_ms: int,
    sleep: Any = asyncio.sleep,
) -> BulkSendReport:
    """Envia a mesma mensagem para cada número, em ordem, com delay entre envios.

    Falhas por destinatário (número inválido, erro do transporte) são
    registradas no relatório e não interrompem os demais. Após um
    NotReadyError os destinatários restantes falham sem envio nem delay.
    """
    report = BulkSendReport()
    not_ready: NotReadyError | None = None
    for index, number in enumerate(numbers):
        if not_ready is not None:
            report.results.append(RecipientResult(to=number, success=False, error=str(not_ready)))
            continue
        try:
            chat_id = to_chat_id(number)
            result = await supervisor.request_send(chat_id, payload)
            report.results.append(
                RecipientResult(to=chat_id, success=True, message_id=result.message_id)
            )
        except NotReadyError as exc:
            not_ready = exc
            logger.warning(
                "bulk_send_not_ready",
                extra={"phase": exc.phase, "remaining": len(numbers) - index},
            )
            report.results.append(RecipientResult(to=number, success=False, error=str(exc)))
            continue
        except (ValueError, GatewayError) as exc:
            logger.warning(
                "bulk_recipient_failed",
                extra={"chat": mask_identifier(number), "error_type": type(exc).__name__},
            )
            report.results.append(RecipientResult(to=number, success=False, error=str(exc)))
        if delay_ms > 0 and index < len(numbers) - 1:
            await sleep(delay_ms / 1000)

    logger.info(
        "bulk_send_completed",
        extra={"total": len(numbers), "successful": report.successful, "failed": report.failed},
    )
    return report
