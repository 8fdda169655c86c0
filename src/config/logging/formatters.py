"""Formatters dos logs: JSON (Cloud Logging) ou texto (terminal local)."""

from __future__ import annotations

import logging
from typing import Literal

from pythonjsonlogger.json import JsonFormatter

LogFormat = Literal["json", "text"]

# Campos fixos de todo log JSON; o restante vem de `extra`
JSON_LOG_FIELDS = ("levelname", "name", "message", "correlation_id", "service")

# Nomes esperados pelo Cloud Logging
FIELD_RENAME_MAP = {
    "levelname": "severity",
    "name": "logger",
}

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s] %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Formatter JSON com timestamp ISO-8601.

    Exemplo de output:
        {"severity": "INFO", "logger": "app.supervisor.supervisor",
         "message": "transport_created", "correlation_id": "",
         "service": "wa_gateway", "client_id": "default",
         "timestamp": "2026-02-02T10:30:00.000000+00:00"}
    """
    return JsonFormatter(
        " ".join(f"%({field})s" for field in JSON_LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
        timestamp=True,
    )


def create_formatter(log_format: LogFormat = "json") -> logging.Formatter:
    """Retorna o formatter para LOG_FORMAT (json|text)."""
    if log_format == "text":
        return logging.Formatter(TEXT_FORMAT)
    return create_json_formatter()
