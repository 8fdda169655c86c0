"""
Módulo FSM: Máquina de Estados da conexão com o cliente de transporte.

Este módulo implementa a FSM determinística que governa
as fases do ciclo de vida da conexão supervisionada.

Estrutura:
    - states/: Definições das fases (ConnectionPhase enum)
    - events/: Eventos de ciclo de vida (LifecycleEvent enum)
    - transitions/: Tabela de transições (TRANSITION_TABLE)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (FSMStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Eventos
from fsm.events import (
    FAILURE_EVENTS,
    START_EVENTS,
    LifecycleEvent,
)

# Manager
from fsm.manager import (
    FSMStateMachine,
    create_fsm,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    TransitionContext,
    evaluate_guards,
)

# Estados
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    LIVE_STATES,
    RECOVERY_STATES,
    ConnectionPhase,
    is_recovering,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    TRANSITION_TABLE,
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    resolve_target,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "FAILURE_EVENTS",
    "LIVE_STATES",
    "RECOVERY_STATES",
    "START_EVENTS",
    "TRANSITION_TABLE",
    "VALID_TRANSITIONS",
    "ConnectionPhase",
    "FSMStateMachine",
    "GuardResult",
    "LifecycleEvent",
    "StateTransition",
    "TransitionContext",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_recovering",
    "is_transition_valid",
    "is_valid_state",
    "resolve_target",
    "validate_transition_map",
]
