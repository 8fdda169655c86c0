"""
Exports públicos do módulo fsm/transitions.

Regras de transição entre fases da conexão.
"""

from fsm.transitions.rules import (
    ANY_PHASE,
    REFLEXIVE_TRANSITIONS,
    TRANSITION_TABLE,
    VALID_TRANSITIONS,
    TransitionMap,
    TransitionTable,
    get_accepted_events,
    get_valid_targets,
    is_transition_valid,
    resolve_target,
    validate_transition_map,
)

__all__ = [
    "ANY_PHASE",
    "REFLEXIVE_TRANSITIONS",
    "TRANSITION_TABLE",
    "VALID_TRANSITIONS",
    "TransitionMap",
    "TransitionTable",
    "get_accepted_events",
    "get_valid_targets",
    "is_transition_valid",
    "resolve_target",
    "validate_transition_map",
]
