"""
Tipos e estruturas de dados para transições de fase.

Este módulo define os tipos usados para representar e rastrear
transições entre fases na FSM da conexão.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.events.lifecycle import LifecycleEvent
from fsm.states.connection import ConnectionPhase


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Representa uma transição de fase na FSM.

    Registro imutável de uma mudança de fase, incluindo:
    - Fases de origem e destino
    - Evento que causou a transição
    - Metadados para auditoria (sem PII)
    - Timestamp da transição

    Attributes:
        from_state: Fase de origem (None = supervisor não iniciado)
        to_state: Fase de destino
        event: Evento que causou a transição
        metadata: Dados adicionais para auditoria (nunca conter PII)
        timestamp: Momento da transição (UTC)
    """

    from_state: ConnectionPhase | None
    to_state: ConnectionPhase
    event: LifecycleEvent
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )

    def __post_init__(self) -> None:
        """Valida invariantes do objeto após inicialização."""
        if not isinstance(self.event, LifecycleEvent):
            raise ValueError(f"event inválido: {self.event!r}")

        if not isinstance(self.to_state, ConnectionPhase):
            raise ValueError(f"to_state inválido: {self.to_state!r}")

    @property
    def is_reflexive(self) -> bool:
        """True se a fase não mudou (ex: renovação de QR)."""
        return self.from_state == self.to_state

    def to_log_dict(self) -> dict[str, Any]:
        """
        Retorna representação segura para logs (sem PII).

        Returns:
            Dict com dados seguros para logging estruturado
        """
        return {
            "from_state": self.from_state.value if self.from_state else None,
            "to_state": self.to_state.value,
            "event": self.event.value,
            "timestamp": self.timestamp.isoformat(),
            # metadata é incluído pois deve ser livre de PII por contrato
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi bem-sucedida
        transition: Dados da transição (se success=True)
        error_reason: Motivo da falha (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
