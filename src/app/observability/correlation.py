"""correlation_id da requisição HTTP corrente (ContextVar).

Tarefas criadas durante a requisição herdam o valor; o consumidor do
supervisor roda fora de qualquer requisição e loga com correlation_id "".
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

# Limite para ids recebidos de fora (header x-correlation-id)
MAX_CORRELATION_ID_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return _correlation_id.get()


def _normalize(received: str | None) -> str:
    value = (received or "").strip()
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH or not value.isprintable():
        return uuid.uuid4().hex
    return value


@contextmanager
def correlation_scope(received: str | None = None) -> Iterator[str]:
    """Define o correlation_id durante o bloco e restaura o anterior ao sair.

    Ids ausentes, longos demais ou com caracteres de controle são
    substituídos por um UUID novo.
    """
    token = _correlation_id.set(_normalize(received))
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)
