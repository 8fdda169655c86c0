"""Dependências FastAPI das rotas /api/*.

Objetos de runtime ficam em app.state (montados por app.app.create_app);
settings caem para os getters cacheados quando ausentes.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import HTTPException, Request, status

from app.infra.notifications import EmailNotifier
from app.supervisor import SessionSupervisor
from config.settings import (
    EmailSettings,
    GatewaySettings,
    get_email_settings,
    get_gateway_settings,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
API_KEY_QUERY = "api_key"


def get_gateway_settings_dep(request: Request) -> GatewaySettings:
    return getattr(request.app.state, "gateway_settings", None) or get_gateway_settings()


def get_email_settings_dep(request: Request) -> EmailSettings:
    return getattr(request.app.state, "email_settings", None) or get_email_settings()


def get_supervisor(request: Request) -> SessionSupervisor:
    supervisor = getattr(request.app.state, "supervisor", None)
    if supervisor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supervisor not initialized",
        )
    return supervisor


def get_email_notifier(request: Request) -> EmailNotifier | None:
    return getattr(request.app.state, "email_notifier", None)


def require_api_key(request: Request) -> None:
    """Valida API key (header x-api-key ou query api_key).

    Sem API_KEY configurada (apenas development) o acesso é liberado.
    """
    expected = get_gateway_settings_dep(request).api_key
    if not expected:
        return

    provided = request.headers.get(API_KEY_HEADER) or request.query_params.get(API_KEY_QUERY)
    if not provided or not secrets.compare_digest(provided, expected):
        logger.warning("api_key_rejected", extra={"path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
