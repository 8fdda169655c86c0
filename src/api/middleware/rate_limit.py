"""Rate limit global de janela fixa por IP para /api/*."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP"


@dataclass(slots=True)
class _Window:
    started_at: float
    count: int = 0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limita requisições por IP em janelas fixas.

    Args:
        app: Aplicação ASGI
        window_seconds: Duração da janela
        max_requests: Requisições permitidas por janela (0 = desativado)
        path_prefix: Apenas caminhos com este prefixo são limitados
        trust_forwarded: Usa x-forwarded-for como IP (só atrás de proxy confiável)
        clock: Relógio monotônico (injetável em testes)
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        window_seconds: float,
        max_requests: int,
        path_prefix: str = "/api/",
        trust_forwarded: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self._path_prefix = path_prefix
        self._trust_forwarded = trust_forwarded
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._last_prune = clock()

    def _client_ip(self, request: Request) -> str:
        if self._trust_forwarded:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _prune(self, now: float) -> None:
        """Remove janelas expiradas (no máximo uma varredura por janela)."""
        if now - self._last_prune < self._window_seconds:
            return
        self._last_prune = now
        expired = [
            key
            for key, window in self._windows.items()
            if now - window.started_at >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def _hit(self, key: str) -> tuple[bool, _Window]:
        now = self._clock()
        self._prune(now)
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self._window_seconds:
            window = _Window(started_at=now)
            self._windows[key] = window
        window.count += 1
        return window.count <= self._max_requests, window

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._max_requests <= 0 or not request.url.path.startswith(self._path_prefix):
            return await call_next(request)

        allowed, window = self._hit(self._client_ip(request))
        remaining = max(self._max_requests - window.count, 0)
        if not allowed:
            retry_after = self._window_seconds - (self._clock() - window.started_at)
            logger.warning(
                "rate_limit_exceeded",
                extra={"path": request.url.path, "count": window.count},
            )
            return JSONResponse(
                {"error": RATE_LIMIT_MESSAGE},
                status_code=429,
                headers={"Retry-After": str(max(math.ceil(retry_after), 1))},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
