"""Mapeamento de exceções de domínio para respostas HTTP {"error": ...}."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from utils.errors import GatewayError, NotReadyError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "WhatsApp client is not ready"


async def _not_ready_handler(request: Request, exc: NotReadyError) -> JSONResponse:
    return JSONResponse(
        {"error": NOT_READY_MESSAGE, "phase": exc.phase},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


async def _gateway_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning(
        "gateway_request_failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        {"error": str(exc)},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=exc.headers,
    )


async def _validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    ]
    return JSONResponse(
        {"error": "Invalid request", "details": details},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra handlers; NotReadyError precede GatewayError (subclasse)."""
    app.add_exception_handler(NotReadyError, _not_ready_handler)
    app.add_exception_handler(GatewayError, _gateway_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_handler)
