"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, create_supervisor

    initialize_app()
    validate_runtime_settings()
    supervisor = create_supervisor()
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.dependencies import (
    create_notifier,
    create_supervisor,
    create_transport_factory,
)
from app.bootstrap.dependencies_stores import create_session_store
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_email_settings,
    get_firestore_settings,
    get_gateway_settings,
    get_keepalive_settings,
    get_session_settings,
    get_supervisor_settings,
    get_transport_settings,
    get_webhook_settings,
)

# Nome do serviço para logs e métricas
SERVICE_NAME = "wa_gateway"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "SERVICE_NAME",
    "collect_settings_errors",
    "create_notifier",
    "create_session_store",
    "create_supervisor",
    "create_transport_factory",
    "initialize_app",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configura logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    log_format = "text" if os.getenv("LOG_FORMAT", "json").lower() == "text" else "json"

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
        log_format=log_format,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings, prefixados por domínio."""
    base = get_base_settings()
    session = get_session_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"session: {error}" for error in session.validate(base))
    errors.extend(f"gateway: {error}" for error in get_gateway_settings().validate(base.is_development))
    errors.extend(f"supervisor: {error}" for error in get_supervisor_settings().validate())
    errors.extend(f"transport: {error}" for error in get_transport_settings().validate())
    errors.extend(f"email: {error}" for error in get_email_settings().validate())
    errors.extend(f"webhook: {error}" for error in get_webhook_settings().validate())
    errors.extend(f"keepalive: {error}" for error in get_keepalive_settings().validate())

    if session.store_backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
