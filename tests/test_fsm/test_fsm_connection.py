"""
Testes do módulo FSM da conexão supervisionada.

Cobre fases, eventos, tabela de transições, guards e a FSMStateMachine.
"""

from dataclasses import dataclass
from datetime import datetime

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    FAILURE_EVENTS,
    LIVE_STATES,
    RECOVERY_STATES,
    START_EVENTS,
    TRANSITION_TABLE,
    VALID_TRANSITIONS,
    ConnectionPhase,
    FSMStateMachine,
    GuardResult,
    LifecycleEvent,
    StateTransition,
    TransitionResult,
    create_fsm,
    evaluate_guards,
    get_valid_targets,
    is_recovering,
    is_transition_valid,
    is_valid_state,
    resolve_target,
    validate_transition_map,
)
from fsm.rules.guards import guard_halted, guard_same_state, guard_valid_state


@dataclass
class _Context:
    client_id: str = "client-test"
    halted: bool = False


def _machine_in(phase: ConnectionPhase) -> FSMStateMachine:
    """Conduz uma FSM nova até a fase pedida por caminhos válidos."""
    paths = {
        ConnectionPhase.STARTING: [],
        ConnectionPhase.AWAITING_PAIRING: [LifecycleEvent.PAIRING_CHALLENGE],
        ConnectionPhase.AUTHENTICATED: [LifecycleEvent.AUTHENTICATED],
        ConnectionPhase.READY: [LifecycleEvent.AUTHENTICATED, LifecycleEvent.READY],
        ConnectionPhase.DISCONNECTED: [
            LifecycleEvent.AUTHENTICATED,
            LifecycleEvent.READY,
            LifecycleEvent.DISCONNECTED,
        ],
        ConnectionPhase.FAILED: [LifecycleEvent.AUTH_FAILURE],
    }
    machine = FSMStateMachine(client_id="client-test")
    assert machine.apply(LifecycleEvent.START_REQUESTED).success
    for event in paths[phase]:
        assert machine.apply(event).success
    assert machine.current_state == phase
    return machine


class TestPhasesAndEvents:
    def test_phase_values_are_api_names(self) -> None:
        assert [p.value for p in ConnectionPhase] == [
            "Starting",
            "AwaitingPairing",
            "Authenticated",
            "Ready",
            "Disconnected",
            "Failed",
        ]
        assert str(ConnectionPhase.AWAITING_PAIRING) == "AwaitingPairing"

    def test_recovery_and_live_sets_partition_phases(self) -> None:
        assert RECOVERY_STATES | LIVE_STATES == set(ConnectionPhase)
        assert not RECOVERY_STATES & LIVE_STATES
        assert DEFAULT_INITIAL_STATE == ConnectionPhase.STARTING
        assert is_recovering(ConnectionPhase.FAILED) is True
        assert is_recovering(ConnectionPhase.READY) is False
        assert is_recovering(None) is False

    def test_is_valid_state(self) -> None:
        assert is_valid_state(ConnectionPhase.READY) is True
        assert is_valid_state("Ready") is False
        assert is_valid_state(None) is False

    def test_event_groups(self) -> None:
        assert LifecycleEvent.DISCONNECTED in FAILURE_EVENTS
        assert LifecycleEvent.READY not in FAILURE_EVENTS
        assert START_EVENTS == {
            LifecycleEvent.START_REQUESTED,
            LifecycleEvent.RESTART_REQUESTED,
            LifecycleEvent.RESTART_TIMER_FIRED,
        }


class TestTransitionTable:
    def test_table_is_consistent(self) -> None:
        assert validate_transition_map() == []
        assert set(TRANSITION_TABLE) == set(LifecycleEvent)

    def test_not_started_only_accepts_start(self) -> None:
        assert VALID_TRANSITIONS[None] == frozenset({ConnectionPhase.STARTING})
        assert resolve_target(None, LifecycleEvent.START_REQUESTED) == ConnectionPhase.STARTING
        assert resolve_target(None, LifecycleEvent.READY) is None
        assert resolve_target(None, LifecycleEvent.RESTART_REQUESTED) is None

    @pytest.mark.parametrize(
        ("phase", "event", "expected"),
        [
            (ConnectionPhase.STARTING, LifecycleEvent.PAIRING_CHALLENGE, ConnectionPhase.AWAITING_PAIRING),
            (ConnectionPhase.AWAITING_PAIRING, LifecycleEvent.PAIRING_CHALLENGE, ConnectionPhase.AWAITING_PAIRING),
            (ConnectionPhase.STARTING, LifecycleEvent.AUTHENTICATED, ConnectionPhase.AUTHENTICATED),
            (ConnectionPhase.AUTHENTICATED, LifecycleEvent.READY, ConnectionPhase.READY),
            (ConnectionPhase.READY, LifecycleEvent.DISCONNECTED, ConnectionPhase.DISCONNECTED),
            (ConnectionPhase.READY, LifecycleEvent.AUTH_FAILURE, ConnectionPhase.FAILED),
            (ConnectionPhase.STARTING, LifecycleEvent.INITIALIZATION_ERROR, ConnectionPhase.FAILED),
            (ConnectionPhase.DISCONNECTED, LifecycleEvent.RESTART_TIMER_FIRED, ConnectionPhase.STARTING),
            (ConnectionPhase.FAILED, LifecycleEvent.RESTART_TIMER_FIRED, ConnectionPhase.STARTING),
            (ConnectionPhase.READY, LifecycleEvent.RESTART_REQUESTED, ConnectionPhase.STARTING),
            (ConnectionPhase.DISCONNECTED, LifecycleEvent.RESTART_LIMIT_REACHED, ConnectionPhase.FAILED),
            (ConnectionPhase.FAILED, LifecycleEvent.RESTART_LIMIT_REACHED, ConnectionPhase.FAILED),
        ],
    )
    def test_resolve_target_accepted(self, phase, event, expected) -> None:
        assert resolve_target(phase, event) == expected
        assert is_transition_valid(phase, expected, event) is True

    @pytest.mark.parametrize(
        ("phase", "event"),
        [
            (ConnectionPhase.STARTING, LifecycleEvent.READY),
            (ConnectionPhase.AWAITING_PAIRING, LifecycleEvent.DISCONNECTED),
            (ConnectionPhase.READY, LifecycleEvent.PAIRING_CHALLENGE),
            (ConnectionPhase.READY, LifecycleEvent.RESTART_TIMER_FIRED),
            (ConnectionPhase.DISCONNECTED, LifecycleEvent.READY),
            (ConnectionPhase.READY, LifecycleEvent.RESTART_LIMIT_REACHED),
        ],
    )
    def test_resolve_target_rejected(self, phase, event) -> None:
        assert resolve_target(phase, event) is None

    def test_every_phase_has_exit(self) -> None:
        for phase in ConnectionPhase:
            assert get_valid_targets(phase)

    def test_is_transition_valid_without_event(self) -> None:
        assert is_transition_valid(ConnectionPhase.READY, ConnectionPhase.DISCONNECTED)
        assert not is_transition_valid(ConnectionPhase.STARTING, ConnectionPhase.READY)


class TestGuards:
    def test_guard_valid_state_rejects_garbage(self) -> None:
        assert guard_valid_state("Ready", LifecycleEvent.READY).allowed is False  # type: ignore[arg-type]
        assert guard_valid_state(None, "ready").allowed is False  # type: ignore[arg-type]
        assert guard_valid_state(None, LifecycleEvent.START_REQUESTED).allowed is True

    def test_guard_halted_only_accepts_operator_restart(self) -> None:
        halted = _Context(halted=True)
        result = guard_halted(ConnectionPhase.FAILED, LifecycleEvent.RESTART_TIMER_FIRED, halted)
        assert result.allowed is False
        assert "restart do operador" in (result.reason or "")
        assert guard_halted(ConnectionPhase.FAILED, LifecycleEvent.RESTART_REQUESTED, halted).allowed
        assert guard_halted(ConnectionPhase.FAILED, LifecycleEvent.RESTART_TIMER_FIRED).allowed

    def test_guard_same_state_allows_declared_reflexives(self) -> None:
        assert guard_same_state(
            ConnectionPhase.AWAITING_PAIRING, LifecycleEvent.PAIRING_CHALLENGE
        ).allowed
        assert guard_same_state(ConnectionPhase.FAILED, LifecycleEvent.AUTH_FAILURE).allowed
        assert guard_same_state(ConnectionPhase.STARTING, LifecycleEvent.RESTART_REQUESTED).allowed

    def test_evaluate_guards_uses_first_denial(self) -> None:
        calls: list[str] = []

        def _first(from_state, event, context=None) -> GuardResult:
            calls.append("first")
            return GuardResult.deny("first")

        def _second(from_state, event, context=None) -> GuardResult:
            calls.append("second")
            return GuardResult.allow()

        result = evaluate_guards(None, LifecycleEvent.START_REQUESTED, guards=[_first, _second])
        assert result.reason == "first"
        assert calls == ["first"]


class TestFSMStateMachine:
    def test_new_machine_is_not_started(self) -> None:
        machine = create_fsm("client-1")
        assert machine.current_state is None
        assert machine.is_started is False
        assert machine.client_id == "client-1"
        assert machine.history == []

    def test_happy_path_records_history(self) -> None:
        machine = _machine_in(ConnectionPhase.READY)

        history = machine.history
        assert [t.event for t in history] == [
            LifecycleEvent.START_REQUESTED,
            LifecycleEvent.AUTHENTICATED,
            LifecycleEvent.READY,
        ]
        assert history[0].from_state is None
        assert history[-1].to_state == ConnectionPhase.READY
        assert isinstance(history[0].timestamp, datetime)

    def test_rejected_event_keeps_phase(self) -> None:
        machine = _machine_in(ConnectionPhase.STARTING)

        result = machine.apply(LifecycleEvent.DISCONNECTED)

        assert result.success is False
        assert "DISCONNECTED" in (result.error_reason or "")
        assert machine.current_state == ConnectionPhase.STARTING
        assert len(machine.history) == 1

    def test_qr_renewal_is_reflexive(self) -> None:
        machine = _machine_in(ConnectionPhase.AWAITING_PAIRING)

        result = machine.apply(LifecycleEvent.PAIRING_CHALLENGE, metadata={"qr_sequence": 2})

        assert result.success is True
        assert result.transition is not None
        assert result.transition.is_reflexive is True
        assert result.transition.metadata == {"qr_sequence": 2}
        assert machine.current_state == ConnectionPhase.AWAITING_PAIRING

    def test_halted_machine_ignores_timer(self) -> None:
        machine = _machine_in(ConnectionPhase.FAILED)
        context = _Context(halted=True)

        assert machine.can_handle(LifecycleEvent.RESTART_TIMER_FIRED, context) is False
        result = machine.apply(LifecycleEvent.RESTART_TIMER_FIRED, context)
        assert result.success is False
        assert machine.current_state == ConnectionPhase.FAILED

        assert machine.apply(LifecycleEvent.RESTART_REQUESTED, context).success
        assert machine.current_state == ConnectionPhase.STARTING

    def test_history_is_bounded(self) -> None:
        machine = FSMStateMachine(client_id="c", history_limit=3)
        machine.apply(LifecycleEvent.START_REQUESTED)
        for _ in range(5):
            machine.apply(LifecycleEvent.PAIRING_CHALLENGE)

        assert len(machine.history) == 3
        assert all(t.event == LifecycleEvent.PAIRING_CHALLENGE for t in machine.history)

    def test_summaries_are_serializable(self) -> None:
        machine = _machine_in(ConnectionPhase.DISCONNECTED)

        summary = machine.get_state_summary()
        assert summary["current_state"] == "Disconnected"
        assert summary["is_recovering"] is True
        assert "restart_timer_fired" in summary["accepted_events"]

        history = machine.get_history_summary()
        assert history[0]["from_state"] is None
        assert history[-1]["event"] == "disconnected"

    def test_reset_clears_state(self) -> None:
        machine = _machine_in(ConnectionPhase.READY)
        machine.reset()
        assert machine.current_state is None
        assert machine.history == []


class TestTypes:
    def test_state_transition_rejects_invalid_values(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(
                from_state=None,
                to_state="Ready",  # type: ignore[arg-type]
                event=LifecycleEvent.READY,
            )
        with pytest.raises(ValueError):
            StateTransition(
                from_state=None,
                to_state=ConnectionPhase.READY,
                event="ready",  # type: ignore[arg-type]
            )

    def test_transition_result_consistency(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)
