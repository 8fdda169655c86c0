"""Settings do supervisor de conexão.

Delays de restart e limite de restarts por janela de tempo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class SupervisorSettings:
    """Configurações do supervisor.

    Attributes:
        restart_delay_seconds: Delay após queda ou falha de autenticação
        init_retry_delay_seconds: Delay após erro de inicialização
        max_restarts: Máximo de restarts dentro da janela (0 = sem limite)
        restart_window_seconds: Janela deslizante do limite de restarts
    """

    restart_delay_seconds: float = 30.0
    init_retry_delay_seconds: float = 60.0
    max_restarts: int = 10
    restart_window_seconds: float = 3600.0

    @property
    def restart_cap_enabled(self) -> bool:
        """Retorna True se o limite de restarts está ativo."""
        return self.max_restarts > 0

    def validate(self) -> list[str]:
        """Valida configurações do supervisor."""
        errors: list[str] = []

        if self.restart_delay_seconds < 0:
            errors.append("SUPERVISOR_RESTART_DELAY_SECONDS deve ser >= 0")

        if self.init_retry_delay_seconds < 0:
            errors.append("SUPERVISOR_INIT_RETRY_DELAY_SECONDS deve ser >= 0")

        if self.max_restarts < 0:
            errors.append("SUPERVISOR_MAX_RESTARTS deve ser >= 0")

        if self.restart_cap_enabled and self.restart_window_seconds <= 0:
            errors.append("SUPERVISOR_RESTART_WINDOW_SECONDS deve ser > 0")

        return errors


def _load_supervisor_from_env() -> SupervisorSettings:
    """Carrega SupervisorSettings de variáveis de ambiente."""
    return SupervisorSettings(
        restart_delay_seconds=float(os.getenv("SUPERVISOR_RESTART_DELAY_SECONDS", "30")),
        init_retry_delay_seconds=float(
            os.getenv("SUPERVISOR_INIT_RETRY_DELAY_SECONDS", "60")
        ),
        max_restarts=int(os.getenv("SUPERVISOR_MAX_RESTARTS", "10")),
        restart_window_seconds=float(
            os.getenv("SUPERVISOR_RESTART_WINDOW_SECONDS", "3600")
        ),
    )


@lru_cache(maxsize=1)
def get_supervisor_settings() -> SupervisorSettings:
    """Retorna instância cacheada de SupervisorSettings."""
    return _load_supervisor_from_env()
