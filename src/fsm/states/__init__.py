"""
Exports públicos do módulo fsm/states.

Fases canônicas da conexão supervisionada.
"""

from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    LIVE_STATES,
    RECOVERY_STATES,
    ConnectionPhase,
    is_recovering,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "LIVE_STATES",
    "RECOVERY_STATES",
    "ConnectionPhase",
    "is_recovering",
    "is_valid_state",
]
