"""Logging estruturado do gateway (python-json-logger).

Todo log carrega service, correlation_id, severity e logger. Telefones
saem mascarados e QR code/session blob nunca são registrados.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import GatewayContextFilter, mask_identifier
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    JSON_LOG_FIELDS,
    LogFormat,
    create_formatter,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "JSON_LOG_FIELDS",
    "GatewayContextFilter",
    "LogFormat",
    "configure_logging",
    "create_formatter",
    "create_json_formatter",
    "get_logger",
    "mask_identifier",
]
