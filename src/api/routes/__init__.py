"""Rotas HTTP do gateway.

- routes/health/: liveness e readiness (fase da conexão)
- routes/gateway/: /api/* protegido por API key
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
