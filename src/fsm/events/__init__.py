"""
Exports públicos do módulo fsm/events.

Eventos de ciclo de vida consumidos pela FSM.
"""

from fsm.events.lifecycle import FAILURE_EVENTS, START_EVENTS, LifecycleEvent

__all__ = [
    "FAILURE_EVENTS",
    "START_EVENTS",
    "LifecycleEvent",
]
