"""
Exports públicos do módulo fsm/rules.

Guards e invariantes para transições de fase.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    GuardResult,
    TransitionContext,
    evaluate_guards,
    guard_halted,
    guard_same_state,
    guard_valid_state,
)

__all__ = [
    "DEFAULT_GUARDS",
    "GuardResult",
    "TransitionContext",
    "evaluate_guards",
    "guard_halted",
    "guard_same_state",
    "guard_valid_state",
]
