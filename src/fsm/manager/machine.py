"""
Máquina de estados (FSMStateMachine) da conexão supervisionada.

Este módulo implementa a FSM que resolve eventos de ciclo de vida em
transições de fase e mantém histórico rastreável e limitado.
"""

from collections import deque
from typing import Any

from fsm.events.lifecycle import LifecycleEvent
from fsm.rules.guards import GuardResult, TransitionContext, evaluate_guards
from fsm.states.connection import ConnectionPhase, is_recovering
from fsm.transitions.rules import (
    get_accepted_events,
    get_valid_targets,
    resolve_target,
)
from fsm.types.transition import StateTransition, TransitionResult

# Histórico é limitado: o processo roda por semanas com restarts periódicos
DEFAULT_HISTORY_LIMIT = 200


class FSMStateMachine:
    """
    Máquina de estados da conexão com o cliente de transporte.

    Gerencia a fase atual, resolve eventos pela tabela de transições,
    avalia guards e mantém histórico para auditoria.

    Attributes:
        current_state: Fase atual (None antes do primeiro start)
        history: Histórico de transições realizadas
    """

    __slots__ = ("_client_id", "_current_state", "_history")

    def __init__(
        self,
        client_id: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            client_id: Identificador do cliente para logs
            history_limit: Máximo de transições mantidas no histórico
        """
        self._current_state: ConnectionPhase | None = None
        self._history: deque[StateTransition] = deque(maxlen=history_limit)
        self._client_id = client_id

    @property
    def current_state(self) -> ConnectionPhase | None:
        """Fase atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def client_id(self) -> str:
        """Identificador do cliente supervisionado."""
        return self._client_id

    @property
    def is_started(self) -> bool:
        """Verifica se o primeiro start já ocorreu."""
        return self._current_state is not None

    @property
    def is_recovering(self) -> bool:
        """Verifica se está em fase de recuperação."""
        return is_recovering(self._current_state)

    def can_handle(
        self,
        event: LifecycleEvent,
        context: TransitionContext | None = None,
    ) -> bool:
        """Verifica se o evento produz transição a partir da fase atual."""
        if resolve_target(self._current_state, event) is None:
            return False
        return evaluate_guards(self._current_state, event, context).allowed

    def get_valid_targets(self) -> frozenset[ConnectionPhase]:
        """Retorna fases de destino válidas a partir da fase atual."""
        return get_valid_targets(self._current_state)

    def apply(
        self,
        event: LifecycleEvent,
        context: TransitionContext | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta aplicar um evento à fase atual.

        Args:
            event: Evento de ciclo de vida recebido
            context: Contexto para avaliação dos guards
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        target = resolve_target(self._current_state, event)
        if target is None:
            current = self._current_state.name if self._current_state else "NONE"
            return TransitionResult(
                success=False,
                error_reason=f"Evento {event.name} não aceito em {current}",
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, event, context)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            event=event,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo da fase atual para observability.

        Returns:
            Dict com informações da fase (seguro para logs)
        """
        return {
            "client_id": self._client_id,
            "current_state": self._current_state.value if self._current_state else None,
            "is_recovering": self.is_recovering,
            "transition_count": len(self._history),
            "accepted_events": sorted(
                e.value for e in get_accepted_events(self._current_state)
            ),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """
        Retorna histórico em formato seguro para logs.

        Returns:
            Lista de transições em formato dict
        """
        return [t.to_log_dict() for t in self._history]

    def reset(self) -> None:
        """
        Reseta a máquina para antes do primeiro start.

        ATENÇÃO: Limpa todo o histórico. Usar apenas no encerramento.
        """
        self._current_state = None
        self._history.clear()


def create_fsm(client_id: str) -> FSMStateMachine:
    """
    Factory function para criar uma FSM.

    Args:
        client_id: Identificador do cliente supervisionado

    Returns:
        FSMStateMachine configurada
    """
    return FSMStateMachine(client_id=client_id)
