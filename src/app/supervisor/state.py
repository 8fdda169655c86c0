"""Estado da sessão supervisionada.

SessionState é mutado exclusivamente pelo SessionSupervisor. Leitores
(rotas HTTP, health) recebem um SessionSnapshot imutável.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fsm.states import ConnectionPhase


@dataclass(slots=True)
class SessionState:
    """Estado vivo da conexão de um client_id.

    Attributes:
        client_id: Identificador do cliente supervisionado
        phase: Fase atual (None antes do primeiro start)
        pairing_challenge: QR code vigente (só em AWAITING_PAIRING)
        last_transition_at: Momento da última transição (UTC)
        retry_count: Restarts consecutivos sem chegar a READY
        last_reason: Motivo da última queda/falha
        halted: True se o limite de restarts foi excedido
    """

    client_id: str
    phase: ConnectionPhase | None = None
    pairing_challenge: str | None = None
    last_transition_at: datetime | None = None
    retry_count: int = 0
    last_reason: str | None = None
    halted: bool = False

    @property
    def is_ready(self) -> bool:
        return self.phase == ConnectionPhase.READY

    def invariant_errors(self) -> list[str]:
        """Lista violações de invariantes (vazia = OK)."""
        errors: list[str] = []
        if self.pairing_challenge is not None and self.phase != ConnectionPhase.AWAITING_PAIRING:
            errors.append(f"pairing_challenge presente fora de AWAITING_PAIRING ({self.phase})")
        if self.retry_count < 0:
            errors.append("retry_count negativo")
        if self.halted and self.phase != ConnectionPhase.FAILED:
            errors.append(f"halted fora de FAILED ({self.phase})")
        return errors

    def snapshot(self, *, restart_pending: bool = False) -> SessionSnapshot:
        return SessionSnapshot(
            client_id=self.client_id,
            phase=self.phase,
            pairing_challenge=self.pairing_challenge,
            last_transition_at=self.last_transition_at,
            retry_count=self.retry_count,
            last_reason=self.last_reason,
            halted=self.halted,
            restart_pending=restart_pending,
        )


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Cópia imutável do SessionState para leitura externa."""

    client_id: str
    phase: ConnectionPhase | None
    pairing_challenge: str | None
    last_transition_at: datetime | None
    retry_count: int
    last_reason: str | None
    halted: bool
    restart_pending: bool

    @property
    def is_ready(self) -> bool:
        return self.phase == ConnectionPhase.READY

    @property
    def phase_name(self) -> str:
        """Nome da fase para a API ("NotStarted" antes do primeiro start)."""
        return self.phase.value if self.phase is not None else "NotStarted"

    def to_dict(self) -> dict[str, Any]:
        """Representação para /api/status (sem o QR code)."""
        return {
            "client_id": self.client_id,
            "phase": self.phase_name,
            "ready": self.is_ready,
            "has_qr_code": self.pairing_challenge is not None,
            "last_transition_at": (
                self.last_transition_at.isoformat() if self.last_transition_at else None
            ),
            "retry_count": self.retry_count,
            "last_reason": self.last_reason,
            "halted": self.halted,
            "restart_pending": self.restart_pending,
        }
