"""
Regras de transição entre fases da conexão.

A tabela de transições é orientada a eventos: cada evento declara as fases
de origem aceitas e a fase de destino. O mapa fase → destinos
(VALID_TRANSITIONS) é derivado da tabela para consultas e validação.
"""

from fsm.events.lifecycle import LifecycleEvent
from fsm.states.connection import ConnectionPhase

# Fase de origem None representa o supervisor ainda não iniciado
SourcePhase = ConnectionPhase | None

# Tipagem explícita das estruturas de regras
TransitionRule = tuple[frozenset[SourcePhase], ConnectionPhase]
TransitionTable = dict[LifecycleEvent, TransitionRule]
TransitionMap = dict[SourcePhase, frozenset[ConnectionPhase]]

ANY_PHASE: frozenset[SourcePhase] = frozenset(ConnectionPhase)

# Tabela de transições
# Chave: evento
# Valor: (fases de origem aceitas, fase de destino)
TRANSITION_TABLE: TransitionTable = {
    LifecycleEvent.START_REQUESTED: (
        frozenset({None}),
        ConnectionPhase.STARTING,
    ),
    # Primeiro QR e renovações do QR
    LifecycleEvent.PAIRING_CHALLENGE: (
        frozenset({ConnectionPhase.STARTING, ConnectionPhase.AWAITING_PAIRING}),
        ConnectionPhase.AWAITING_PAIRING,
    ),
    LifecycleEvent.AUTHENTICATED: (
        frozenset({ConnectionPhase.STARTING, ConnectionPhase.AWAITING_PAIRING}),
        ConnectionPhase.AUTHENTICATED,
    ),
    LifecycleEvent.READY: (
        frozenset({ConnectionPhase.AUTHENTICATED}),
        ConnectionPhase.READY,
    ),
    LifecycleEvent.DISCONNECTED: (
        frozenset({ConnectionPhase.READY}),
        ConnectionPhase.DISCONNECTED,
    ),
    LifecycleEvent.AUTH_FAILURE: (ANY_PHASE, ConnectionPhase.FAILED),
    LifecycleEvent.INITIALIZATION_ERROR: (ANY_PHASE, ConnectionPhase.FAILED),
    LifecycleEvent.RESTART_TIMER_FIRED: (
        frozenset({ConnectionPhase.DISCONNECTED, ConnectionPhase.FAILED}),
        ConnectionPhase.STARTING,
    ),
    LifecycleEvent.RESTART_LIMIT_REACHED: (
        frozenset({ConnectionPhase.DISCONNECTED, ConnectionPhase.FAILED}),
        ConnectionPhase.FAILED,
    ),
    LifecycleEvent.RESTART_REQUESTED: (ANY_PHASE, ConnectionPhase.STARTING),
}

# Transições reflexivas permitidas (fase, evento)
REFLEXIVE_TRANSITIONS: frozenset[tuple[ConnectionPhase, LifecycleEvent]] = frozenset({
    (ConnectionPhase.AWAITING_PAIRING, LifecycleEvent.PAIRING_CHALLENGE),
    (ConnectionPhase.FAILED, LifecycleEvent.AUTH_FAILURE),
    (ConnectionPhase.FAILED, LifecycleEvent.INITIALIZATION_ERROR),
    (ConnectionPhase.FAILED, LifecycleEvent.RESTART_LIMIT_REACHED),
    (ConnectionPhase.STARTING, LifecycleEvent.RESTART_REQUESTED),
})


def _build_transition_map(table: TransitionTable) -> TransitionMap:
    """Deriva o mapa fase → destinos a partir da tabela de eventos."""
    targets: dict[SourcePhase, set[ConnectionPhase]] = {None: set()}
    for phase in ConnectionPhase:
        targets[phase] = set()
    for sources, target in table.values():
        for source in sources:
            targets[source].add(target)
    return {source: frozenset(values) for source, values in targets.items()}


VALID_TRANSITIONS: TransitionMap = _build_transition_map(TRANSITION_TABLE)


def resolve_target(phase: SourcePhase, event: LifecycleEvent) -> ConnectionPhase | None:
    """
    Resolve a fase de destino para um evento recebido na fase atual.

    Args:
        phase: Fase atual (None se supervisor não iniciado)
        event: Evento recebido

    Returns:
        Fase de destino, ou None se o evento não é aceito nessa fase
    """
    rule = TRANSITION_TABLE.get(event)
    if rule is None:
        return None
    sources, target = rule
    if phase not in sources:
        return None
    return target


def get_valid_targets(phase: SourcePhase) -> frozenset[ConnectionPhase]:
    """
    Retorna as fases de destino alcançáveis a partir de uma fase.

    Args:
        phase: Fase de origem

    Returns:
        Conjunto de fases de destino permitidas
    """
    return VALID_TRANSITIONS.get(phase, frozenset())


def get_accepted_events(phase: SourcePhase) -> frozenset[LifecycleEvent]:
    """Retorna os eventos aceitos na fase informada."""
    return frozenset(
        event for event, (sources, _) in TRANSITION_TABLE.items() if phase in sources
    )


def is_transition_valid(
    from_state: SourcePhase,
    to_state: ConnectionPhase,
    event: LifecycleEvent | None = None,
) -> bool:
    """
    Verifica se uma transição é válida segundo a tabela.

    Args:
        from_state: Fase de origem
        to_state: Fase de destino
        event: Evento gatilho (se informado, valida a regra do evento)

    Returns:
        True se a transição é permitida, False caso contrário
    """
    if event is not None:
        return resolve_target(from_state, event) == to_state
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade da tabela de transições.

    Verifica:
    - Todo evento possui regra
    - Toda fase possui ao menos uma saída (nenhuma fase é beco sem saída)
    - Destinos e origens são fases válidas
    - Reflexivas permitidas existem na tabela

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for event in LifecycleEvent:
        if event not in TRANSITION_TABLE:
            errors.append(f"Evento {event.name} ausente em TRANSITION_TABLE")

    for phase in ConnectionPhase:
        if not get_valid_targets(phase):
            errors.append(f"Fase {phase.name} não possui transições de saída")

    for event, (sources, target) in TRANSITION_TABLE.items():
        if not isinstance(target, ConnectionPhase):
            errors.append(f"Evento {event.name}: destino inválido {target!r}")
        for source in sources:
            if source is not None and not isinstance(source, ConnectionPhase):
                errors.append(f"Evento {event.name}: origem inválida {source!r}")

    for phase, event in REFLEXIVE_TRANSITIONS:
        if resolve_target(phase, event) != phase:
            errors.append(
                f"Reflexiva {phase.name} --{event.name}--> {phase.name} ausente na tabela"
            )

    for event, (sources, target) in TRANSITION_TABLE.items():
        if target in sources and (target, event) not in REFLEXIVE_TRANSITIONS:
            errors.append(
                f"Reflexiva {target.name} --{event.name}--> {target.name} não declarada"
            )

    return errors
