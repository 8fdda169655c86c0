"""
Exports públicos do módulo fsm/manager.

Máquina de estados (FSMStateMachine) da conexão supervisionada.
"""

from fsm.manager.machine import (
    DEFAULT_HISTORY_LIMIT,
    FSMStateMachine,
    create_fsm,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "FSMStateMachine",
    "create_fsm",
]
