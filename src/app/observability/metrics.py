"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente (Cloud Logging, BigQuery, etc.).

Métricas suportadas:
- Latência: tempos de execução por componente/operação
- Transição: counter de transições de fase do supervisor
- Restart: counter de restarts agendados/executados/bloqueados

Uso:
    from app.observability.metrics import record_latency, record_restart

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("transport", "send_message", latency_ms)

    record_restart("scheduled", delay_seconds=30, retry_count=2)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(component: str, operation: str, latency_ms: float) -> None:
    """Registra latência de uma chamada externa (sidecar, webhook)."""
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
        },
    )


def record_transition(
    client_id: str,
    from_phase: str | None,
    to_phase: str,
    event: str,
) -> None:
    """Registra transição de fase do supervisor."""
    logger.info(
        "metric_transition",
        extra={
            "metric_type": "transition",
            "component": "supervisor",
            "client_id": client_id,
            "from_phase": from_phase,
            "to_phase": to_phase,
            "event": event,
        },
    )


def record_restart(
    outcome: str,
    retry_count: int,
    delay_seconds: float | None = None,
    metadata: dict[str, str | float | int] | None = None,
) -> None:
    """Registra restart do cliente de transporte.

    Args:
        outcome: "scheduled", "executed", "cancelled" ou "halted"
        retry_count: Restarts consecutivos sem chegar a READY
        delay_seconds: Delay do timer (quando agendado)
        metadata: Metadados adicionais opcionais
    """
    extra: dict[str, object] = {
        "metric_type": "restart",
        "component": "supervisor",
        "outcome": outcome,
        "retry_count": retry_count,
    }
    if delay_seconds is not None:
        extra["delay_seconds"] = delay_seconds
    if metadata:
        extra.update(metadata)

    logger.info(
        "metric_restart",
        extra=extra,
    )
