"""
Guards e invariantes para transições de fase.

Guards são regras adicionais avaliadas depois da tabela de transições.
Podem bloquear uma transição com base no contexto do supervisor
(ex: restarts bloqueados após exceder o limite).
"""

from typing import Protocol

from fsm.events.lifecycle import LifecycleEvent
from fsm.states.connection import ConnectionPhase
from fsm.transitions.rules import REFLEXIVE_TRANSITIONS, resolve_target


class TransitionContext(Protocol):
    """
    Protocolo que define o contexto necessário para avaliar guards.

    O contexto é passado pelo caller (supervisor) e contém informações
    relevantes para decidir se uma transição deve ocorrer.
    """

    @property
    def client_id(self) -> str:
        """Identificador do cliente supervisionado."""
        ...

    @property
    def halted(self) -> bool:
        """True se o limite de restarts foi excedido."""
        ...


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


def guard_valid_state(
    from_state: ConnectionPhase | None,
    event: LifecycleEvent,
    context: TransitionContext | None = None,
) -> GuardResult:
    """
    Guard: Verifica se fase de origem e evento são válidos.

    Args:
        from_state: Fase de origem (None = não iniciado)
        event: Evento gatilho
        context: Contexto do supervisor (não usado)

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state is not None and not isinstance(from_state, ConnectionPhase):
        return GuardResult.deny(f"Fase de origem inválida: {from_state}")

    if not isinstance(event, LifecycleEvent):
        return GuardResult.deny(f"Evento inválido: {event}")

    return GuardResult.allow()


def guard_halted(
    from_state: ConnectionPhase | None,
    event: LifecycleEvent,
    context: TransitionContext | None = None,
) -> GuardResult:
    """
    Guard: Supervisor bloqueado só aceita restart explícito do operador.

    Args:
        from_state: Fase de origem
        event: Evento gatilho
        context: Contexto do supervisor

    Returns:
        GuardResult indicando se transição é permitida
    """
    if context is None or not context.halted:
        return GuardResult.allow()

    if event == LifecycleEvent.RESTART_REQUESTED:
        return GuardResult.allow()

    return GuardResult.deny(
        f"Supervisor bloqueado em {from_state}; requer restart do operador"
    )


def guard_same_state(
    from_state: ConnectionPhase | None,
    event: LifecycleEvent,
    context: TransitionContext | None = None,
) -> GuardResult:
    """
    Guard: Previne transição reflexiva fora dos casos explícitos.

    Reflexivas permitidas: renovação de QR, falha repetida em FAILED e
    restart explícito durante STARTING.

    Args:
        from_state: Fase de origem
        event: Evento gatilho
        context: Contexto do supervisor (não usado)

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state is None:
        return GuardResult.allow()

    if resolve_target(from_state, event) != from_state:
        return GuardResult.allow()

    if (from_state, event) in REFLEXIVE_TRANSITIONS:
        return GuardResult.allow()

    return GuardResult.deny(
        f"Transição reflexiva não permitida: {from_state.name} --{event.name}"
    )


# Lista de guards a serem aplicados em ordem
# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS = [
    guard_valid_state,
    guard_halted,
    guard_same_state,
]


def evaluate_guards(
    from_state: ConnectionPhase | None,
    event: LifecycleEvent,
    context: TransitionContext | None = None,
    guards: list | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Fase de origem
        event: Evento gatilho
        context: Contexto do supervisor (opcional)
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, event, context)
        if not result.allowed:
            return result

    return GuardResult.allow()
