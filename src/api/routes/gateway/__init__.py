"""Rotas /api/* do gateway (QR, status, envio, consultas, restart)."""

from api.routes.gateway.errors import register_exception_handlers
from api.routes.gateway.router import router

__all__ = ["register_exception_handlers", "router"]
