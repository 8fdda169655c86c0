"""
Fases canônicas da conexão com o cliente de transporte (WhatsApp Web).

Este módulo define as fases que a sessão supervisionada pode assumir
durante seu ciclo de vida. As fases são determinísticas e explícitas;
apenas o supervisor as altera, sempre via FSMStateMachine.
"""

from enum import StrEnum


class ConnectionPhase(StrEnum):
    """
    Fases da sessão supervisionada.

    Fases de conexão:
        - STARTING: Cliente de transporte sendo instanciado/inicializado
        - AWAITING_PAIRING: QR code emitido, aguardando leitura pelo operador
        - AUTHENTICATED: Credenciais aceitas, cliente ainda carregando
        - READY: Cliente pronto para enviar e receber mensagens

    Fases de recuperação (restart agendado ou bloqueado):
        - DISCONNECTED: Queda no meio da sessão
        - FAILED: Falha de autenticação ou de inicialização

    Os valores são os nomes expostos na API (ex: "Starting").
    """

    STARTING = "Starting"
    AWAITING_PAIRING = "AwaitingPairing"
    AUTHENTICATED = "Authenticated"
    READY = "Ready"
    DISCONNECTED = "Disconnected"
    FAILED = "Failed"

    def __str__(self) -> str:
        return self.value


# Fases a partir das quais o timer de restart pode disparar
RECOVERY_STATES: frozenset[ConnectionPhase] = frozenset({
    ConnectionPhase.DISCONNECTED,
    ConnectionPhase.FAILED,
})

# Fases em que existe um cliente de transporte vivo
LIVE_STATES: frozenset[ConnectionPhase] = frozenset({
    ConnectionPhase.STARTING,
    ConnectionPhase.AWAITING_PAIRING,
    ConnectionPhase.AUTHENTICATED,
    ConnectionPhase.READY,
})

# Fase de entrada de todo ciclo (start inicial e restarts)
DEFAULT_INITIAL_STATE: ConnectionPhase = ConnectionPhase.STARTING


def is_recovering(phase: ConnectionPhase | None) -> bool:
    """
    Verifica se a fase é de recuperação (DISCONNECTED ou FAILED).

    Args:
        phase: Fase a ser verificada (None = supervisor não iniciado)

    Returns:
        True se a fase aguarda restart
    """
    return phase in RECOVERY_STATES


def is_valid_state(phase: object) -> bool:
    """
    Verifica se o valor é uma fase válida do enum.

    Args:
        phase: Valor a ser verificado

    Returns:
        True se é um ConnectionPhase válido
    """
    return isinstance(phase, ConnectionPhase)
