"""Política de restart do cliente de transporte.

Delays fixos por causa da falha, sem backoff exponencial, e limite
opcional de restarts dentro de uma janela deslizante.
"""

from __future__ import annotations

import time
from collections import deque
from typing import TYPE_CHECKING

from fsm.events import LifecycleEvent

if TYPE_CHECKING:
    from collections.abc import Callable

    from config.settings.supervisor import SupervisorSettings


class RestartPolicy:
    """Decide o delay do próximo restart e se ele ainda é permitido.

    Args:
        restart_delay_seconds: Delay após queda ou falha de autenticação
        init_retry_delay_seconds: Delay após erro de inicialização
        max_restarts: Máximo de restarts na janela (0 = sem limite)
        window_seconds: Tamanho da janela deslizante
        clock: Relógio monotônico (injetável em testes)
    """

    __slots__ = (
        "_clock",
        "_history",
        "_init_retry_delay",
        "_max_restarts",
        "_restart_delay",
        "_window",
    )

    def __init__(
        self,
        restart_delay_seconds: float = 30.0,
        init_retry_delay_seconds: float = 60.0,
        max_restarts: int = 10,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._restart_delay = restart_delay_seconds
        self._init_retry_delay = init_retry_delay_seconds
        self._max_restarts = max_restarts
        self._window = window_seconds
        self._clock = clock
        self._history: deque[float] = deque()

    @classmethod
    def from_settings(
        cls,
        settings: SupervisorSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> RestartPolicy:
        return cls(
            restart_delay_seconds=settings.restart_delay_seconds,
            init_retry_delay_seconds=settings.init_retry_delay_seconds,
            max_restarts=settings.max_restarts,
            window_seconds=settings.restart_window_seconds,
            clock=clock,
        )

    @property
    def enabled(self) -> bool:
        """True se o limite de restarts está ativo."""
        return self._max_restarts > 0

    def delay_for(self, event: LifecycleEvent) -> float:
        """Delay do restart agendado após o evento de falha."""
        if event == LifecycleEvent.INITIALIZATION_ERROR:
            return self._init_retry_delay
        return self._restart_delay

    def _prune(self) -> None:
        cutoff = self._clock() - self._window
        while self._history and self._history[0] <= cutoff:
            self._history.popleft()

    def recent_restarts(self) -> int:
        """Quantidade de restarts dentro da janela atual."""
        self._prune()
        return len(self._history)

    def allows_restart(self) -> bool:
        """Verifica se mais um restart cabe na janela."""
        if not self.enabled:
            return True
        return self.recent_restarts() < self._max_restarts

    def record_restart(self) -> None:
        """Registra um restart executado."""
        self._history.append(self._clock())

    def reset(self) -> None:
        """Esquece o histórico (restart explícito do operador)."""
        self._history.clear()
