"""Observabilidade: correlation_id das requisições e métricas em logs."""

from app.observability.correlation import correlation_scope, get_correlation_id
from app.observability.metrics import (
    record_latency,
    record_restart,
    record_transition,
)

__all__ = [
    "correlation_scope",
    "get_correlation_id",
    "record_latency",
    "record_restart",
    "record_transition",
]
