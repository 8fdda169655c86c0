"""Entrypoint do gateway WhatsApp Web.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import CorrelationIdMiddleware, RateLimitMiddleware
from api.routes import create_api_router
from api.routes.gateway import register_exception_handlers
from app.bootstrap import (
    create_session_store,
    create_supervisor,
    initialize_app,
    validate_runtime_settings,
)
from app.infra.keepalive import start_keepalive, stop_keepalive
from app.infra.notifications import EmailNotifier
from config.logging import get_logger
from config.settings import (
    get_base_settings,
    get_email_settings,
    get_gateway_settings,
    get_keepalive_settings,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.protocols.session_store import SessionStoreProtocol
    from app.supervisor import SessionSupervisor
    from config.settings import EmailSettings, GatewaySettings, KeepAliveSettings

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SUPERVISOR_STOP_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria session store e supervisor (se não injetados) e inicia o supervisor
    - Agenda o self-ping (se KEEPALIVE_URL/RENDER_EXTERNAL_URL definido)

    Shutdown:
    - Cancela o self-ping
    - Para o supervisor (aguarda destroy do transporte)
    - Fecha o session store
    """
    logger.info("app_starting", extra={"service": "wa-gateway"})
    validate_runtime_settings()

    if app.state.supervisor is None:
        app.state.session_store = app.state.session_store or create_session_store()
        app.state.supervisor = create_supervisor(session_store=app.state.session_store)

    supervisor: SessionSupervisor = app.state.supervisor
    if not supervisor.is_running:
        await supervisor.start()
    keepalive_task = start_keepalive(app.state.keepalive_settings)

    yield

    logger.info("app_shutting_down", extra={"service": "wa-gateway"})
    await stop_keepalive(keepalive_task)
    await supervisor.stop(drain_timeout_seconds=SUPERVISOR_STOP_TIMEOUT_SECONDS)
    store: SessionStoreProtocol | None = app.state.session_store
    if store is not None:
        await store.close()


def create_app(
    *,
    supervisor: SessionSupervisor | None = None,
    session_store: SessionStoreProtocol | None = None,
    gateway_settings: GatewaySettings | None = None,
    email_settings: EmailSettings | None = None,
    email_notifier: EmailNotifier | None = None,
    keepalive_settings: KeepAliveSettings | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Dependências injetadas (testes) substituem as criadas no lifespan.

    Returns:
        Aplicação FastAPI configurada.
    """
    gateway_settings = gateway_settings or get_gateway_settings()
    email_settings = email_settings or get_email_settings()

    fastapi_app = FastAPI(
        title="WA Gateway",
        description="Gateway HTTP para uma sessão WhatsApp Web supervisionada",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.state.started_at = time.monotonic()
    fastapi_app.state.supervisor = supervisor
    fastapi_app.state.session_store = session_store
    fastapi_app.state.gateway_settings = gateway_settings
    fastapi_app.state.email_settings = email_settings
    fastapi_app.state.email_notifier = email_notifier or EmailNotifier(email_settings)
    fastapi_app.state.keepalive_settings = keepalive_settings or get_keepalive_settings()

    # Ordem: o último adicionado é o mais externo (CORS → correlation → rate limit)
    fastapi_app.add_middleware(
        RateLimitMiddleware,
        window_seconds=gateway_settings.rate_limit_window_seconds,
        max_requests=gateway_settings.rate_limit_max_requests,
        trust_forwarded=gateway_settings.trust_proxy,
    )
    fastapi_app.add_middleware(CorrelationIdMiddleware)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=gateway_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "wa-gateway"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint do script wa-gateway (reload apenas em development)."""
    import uvicorn

    settings = get_base_settings()
    logger.info("server_starting", extra={"port": settings.port, "environment": settings.environment})
    uvicorn.run(
        "app.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
