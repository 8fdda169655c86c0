"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()

SERVICE_NAME = "wa-gateway"

StoreStatus = Literal["connected", "disconnected", "not_configured"]


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    uptime: float
    client_ready: bool
    phase: str
    session_store: StoreStatus
    version: str = "1.0.0"


def _phase_of(request: Request) -> tuple[str, bool]:
    supervisor = getattr(request.app.state, "supervisor", None)
    if supervisor is None:
        return "NotStarted", False
    snapshot = supervisor.snapshot()
    return snapshot.phase_name, snapshot.is_ready


async def _store_status(request: Request) -> StoreStatus:
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        return "not_configured"
    return "connected" if await store.ping() else "disconnected"


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness: processo de pé, independente da fase e do store."""
    phase, ready = _phase_of(request)
    started_at = getattr(request.app.state, "started_at", None)
    uptime = time.monotonic() - started_at if started_at is not None else 0.0
    return HealthResponse(
        status="OK",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
        uptime=round(uptime, 3),
        client_ready=ready,
        phase=phase,
        session_store=await _store_status(request),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness: 200 apenas com a conexão em Ready."""
    phase, ready = _phase_of(request)
    payload = {
        "status": "ready" if ready else "not_ready",
        "phase": phase,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)
