"""Filter de contexto e mascaramento para os logs do gateway.

Todo record recebe service e correlation_id. Campos de `extra` que
carregam identificadores de chat são mascarados, e QR code ou session
blob nunca chegam ao handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Quantidade de caracteres finais preservados ao mascarar identificadores
MASK_VISIBLE_SUFFIX = 4

# Campos de `extra` com telefone/chat id
MASKED_FIELDS = frozenset({"chat", "chat_id", "to", "sender", "from_number"})

# Campos que nunca podem aparecer em log (credenciais de pareamento)
REDACTED_FIELDS = frozenset({"qr", "challenge", "session", "session_blob"})
REDACTED = "[redacted]"


def mask_identifier(value: str | None, visible: int = MASK_VISIBLE_SUFFIX) -> str:
    """Mascara telefone/chat id preservando só o sufixo.

    Exemplo:
        mask_identifier("5511999998888@c.us") -> "***8888"
    """
    if not value:
        return ""
    if value.startswith("***"):
        return value
    digits = value.split("@", 1)[0]
    if len(digits) <= visible:
        return "***"
    return f"***{digits[-visible:]}"


class GatewayContextFilter(logging.Filter):
    """Injeta service e correlation_id e protege campos sensíveis.

    Args:
        service_name: Nome do serviço nos logs
        correlation_id_getter: Retorna o correlation_id da requisição atual
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        # correlation_id explícito em `extra` tem precedência
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._get_correlation_id()
        record.service = self._service_name

        for name in MASKED_FIELDS:
            value = record.__dict__.get(name)
            if isinstance(value, str):
                record.__dict__[name] = mask_identifier(value)
        for name in REDACTED_FIELDS:
            if name in record.__dict__:
                record.__dict__[name] = REDACTED
        return True
