"""
Eventos que alimentam a máquina de estados da conexão.

Eventos vêm de três origens:
    - Cliente de transporte (QR, autenticação, ready, falhas, quedas)
    - Timer de restart do supervisor
    - Comandos do operador (start/restart)
"""

from enum import StrEnum


class LifecycleEvent(StrEnum):
    """Eventos de ciclo de vida reconhecidos pela FSM."""

    # Supervisor / operador
    START_REQUESTED = "start_requested"
    RESTART_REQUESTED = "restart_requested"
    RESTART_TIMER_FIRED = "restart_timer_fired"

    # Cliente de transporte
    PAIRING_CHALLENGE = "pairing_challenge"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    DISCONNECTED = "disconnected"
    AUTH_FAILURE = "auth_failure"
    INITIALIZATION_ERROR = "initialization_error"

    # Limite de restarts por janela excedido
    RESTART_LIMIT_REACHED = "restart_limit_reached"

    def __str__(self) -> str:
        return self.value


# Eventos que disparam agendamento de restart
FAILURE_EVENTS: frozenset[LifecycleEvent] = frozenset({
    LifecycleEvent.DISCONNECTED,
    LifecycleEvent.AUTH_FAILURE,
    LifecycleEvent.INITIALIZATION_ERROR,
})

# Eventos que (re)criam o cliente de transporte
START_EVENTS: frozenset[LifecycleEvent] = frozenset({
    LifecycleEvent.START_REQUESTED,
    LifecycleEvent.RESTART_REQUESTED,
    LifecycleEvent.RESTART_TIMER_FIRED,
})
