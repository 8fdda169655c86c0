"""Supervisor do ciclo de vida da conexão com o cliente de transporte.

Responsabilidades:
- Possuir a única instância viva do cliente de transporte
- Consumir eventos do transporte, timers e comandos do operador em uma
  única fila, processando cada mensagem até o fim antes da próxima
- Aplicar as transições via FSMStateMachine e executar efeitos colaterais
- Agendar restarts com delay fixo (no máximo um timer pendente)
- Persistir/restaurar o session blob
- Notificar o operador (fire-and-forget, falhas contidas)

Eventos carregam a geração do cliente que os emitiu; eventos de um
cliente já destruído são descartados.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any

from app.observability.metrics import record_latency, record_restart, record_transition
from app.protocols.models import OutboundPayload
from app.protocols.transport import TransportEvent, TransportEventKind
from app.supervisor.restart_policy import RestartPolicy
from app.supervisor.state import SessionSnapshot, SessionState
from app.supervisor.tasks import BackgroundTasks
from config.logging import mask_identifier
from fsm.events import FAILURE_EVENTS, START_EVENTS, LifecycleEvent
from fsm.manager import FSMStateMachine
from fsm.states import ConnectionPhase
from utils.errors import (
    AuthFailureError,
    GatewayError,
    InitializationError,
    NotificationFailure,
    NotReadyError,
    PairingRequiredError,
    SupervisorStoppedError,
    TransportDisconnectedError,
    TransportError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from app.protocols.inbound_handler import InboundHandlerProtocol
    from app.protocols.models import InboundMessage, SendResult
    from app.protocols.notifier import NotifierProtocol
    from app.protocols.session_store import SessionBlob, SessionStoreProtocol
    from app.protocols.transport import TransportClientProtocol, TransportFactory

logger = logging.getLogger(__name__)

RESTART_LIMIT_REASON = "restart limit reached"

_TRANSPORT_EVENT_MAP: dict[TransportEventKind, LifecycleEvent] = {
    TransportEventKind.PAIRING_CHALLENGE: LifecycleEvent.PAIRING_CHALLENGE,
    TransportEventKind.AUTHENTICATED: LifecycleEvent.AUTHENTICATED,
    TransportEventKind.READY: LifecycleEvent.READY,
    TransportEventKind.AUTH_FAILURE: LifecycleEvent.AUTH_FAILURE,
    TransportEventKind.DISCONNECTED: LifecycleEvent.DISCONNECTED,
    TransportEventKind.INITIALIZATION_ERROR: LifecycleEvent.INITIALIZATION_ERROR,
}

# Queda nessas fases (ex.: tentativas de QR esgotadas) encerra o cliente
# antes de READY e segue o caminho de falha de inicialização
_PRE_READY_PHASES: frozenset[ConnectionPhase] = frozenset({
    ConnectionPhase.STARTING,
    ConnectionPhase.AWAITING_PAIRING,
    ConnectionPhase.AUTHENTICATED,
})

# Classificação das falhas absorvidas pela máquina de estados (logs)
_FAILURE_ERRORS: dict[LifecycleEvent, type[GatewayError]] = {
    LifecycleEvent.AUTH_FAILURE: AuthFailureError,
    LifecycleEvent.DISCONNECTED: TransportDisconnectedError,
    LifecycleEvent.INITIALIZATION_ERROR: InitializationError,
}


# ──────────────────────────────────────────────────────────────────────────────
# Mensagens da fila
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class _TransportMessage:
    generation: int
    event: TransportEvent


@dataclass(frozen=True, slots=True)
class _TimerFired:
    timer_id: int


@dataclass(slots=True)
class _Command:
    event: LifecycleEvent | None
    done: asyncio.Future[bool] = field(default_factory=lambda: asyncio.get_running_loop().create_future())


async def safe_notify(name: str, call: Awaitable[None]) -> None:
    """Executa notificação contendo qualquer falha (logada, nunca propagada)."""
    try:
        await call
    except Exception as exc:
        failure = NotificationFailure(f"{name}: {exc}")
        logger.warning(
            "notification_failed",
            extra={
                "notification": name,
                "error_type": type(exc).__name__,
                "error": str(failure),
            },
        )


class SessionSupervisor:
    """Dono do cliente de transporte e do SessionState de um client_id.

    Args:
        client_id: Identificador do cliente (chave no session store)
        transport_factory: Cria clientes de transporte novos
        session_store: Persistência do session blob
        notifier: Notificações ao operador
        restart_policy: Delays e limite de restarts
    """

    def __init__(
        self,
        *,
        client_id: str,
        transport_factory: TransportFactory,
        session_store: SessionStoreProtocol,
        notifier: NotifierProtocol,
        restart_policy: RestartPolicy | None = None,
    ) -> None:
        self._client_id = client_id
        self._transport_factory = transport_factory
        self._session_store = session_store
        self._notifier = notifier
        self._policy = restart_policy or RestartPolicy()

        self._state = SessionState(client_id=client_id)
        self._fsm = FSMStateMachine(client_id=client_id)
        self._queue: asyncio.Queue[_TransportMessage | _TimerFired | _Command] = asyncio.Queue()
        self._consumer: asyncio.Task[None] | None = None
        self._stopping = False
        self._background = BackgroundTasks()
        self._inbound_handlers: list[InboundHandlerProtocol] = []

        self._transport: TransportClientProtocol | None = None
        self._generation = 0
        self._init_task: asyncio.Task[None] | None = None

        self._restart_timer: asyncio.Task[None] | None = None
        self._timer_seq = 0

    # ──────────────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────────────

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def notifier(self) -> NotifierProtocol:
        return self._notifier

    @property
    def is_running(self) -> bool:
        return self._consumer is not None and not self._consumer.done() and not self._stopping

    @property
    def restart_pending(self) -> bool:
        return self._restart_timer is not None

    def snapshot(self) -> SessionSnapshot:
        """Cópia imutável do estado atual."""
        return self._state.snapshot(restart_pending=self.restart_pending)

    def transition_history(self) -> list[dict[str, Any]]:
        return self._fsm.get_history_summary()

    def add_inbound_handler(self, handler: InboundHandlerProtocol) -> None:
        """Registra handler disparado para cada mensagem recebida."""
        self._inbound_handlers.append(handler)

    # ──────────────────────────────────────────────────────────────────────
    # Comandos do operador
    # ──────────────────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Inicia o consumidor e o primeiro cliente de transporte."""
        if self._stopping:
            raise SupervisorStoppedError("supervisor parado")
        if self._consumer is not None:
            raise RuntimeError("supervisor já iniciado")
        self._consumer = asyncio.create_task(self._run(), name=f"supervisor:{self._client_id}")
        logger.info("supervisor_started", extra={"client_id": self._client_id})
        await self._submit(LifecycleEvent.START_REQUESTED)

    async def restart(self) -> None:
        """Restart explícito: cancela timer pendente e reinicia imediatamente.

        Raises:
            SupervisorStoppedError: Supervisor não iniciado ou em shutdown
        """
        if not self.is_running:
            raise SupervisorStoppedError("supervisor não iniciado")
        await self._submit(LifecycleEvent.RESTART_REQUESTED)

    async def stop(self, drain_timeout_seconds: float = 10.0) -> None:
        """Cancela timer, destrói o cliente e encerra o consumidor.

        Comandos recebidos depois do pedido de shutdown são recusados com
        SupervisorStoppedError.
        """
        consumer = self._consumer
        if consumer is None:
            return
        if not consumer.done():
            if not self._stopping:
                await self._submit(None)
            await consumer
        self._consumer = None
        await self._background.drain(timeout_seconds=drain_timeout_seconds)
        logger.info("supervisor_stopped", extra={"client_id": self._client_id})

    async def _submit(self, event: LifecycleEvent | None) -> bool:
        if self._stopping:
            raise SupervisorStoppedError("supervisor parado")
        if event is None:
            self._stopping = True
        command = _Command(event=event)
        self._queue.put_nowait(command)
        return await command.done

    # ──────────────────────────────────────────────────────────────────────
    # Operações gated por READY
    # ──────────────────────────────────────────────────────────────────────

    def _require_ready(self) -> TransportClientProtocol:
        if self._state.phase != ConnectionPhase.READY or self._transport is None:
            raise NotReadyError(self._state.phase)
        return self._transport

    async def request_send(self, target: str, payload: OutboundPayload | str) -> SendResult:
        """Envia mensagem se READY; caso contrário NotReadyError, sem enfileirar."""
        transport = self._require_ready()
        if isinstance(payload, str):
            payload = OutboundPayload(text=payload)
        start = time.perf_counter()
        try:
            result = await transport.send_message(target, payload)
        except (NotReadyError, TransportError):
            raise
        except Exception as exc:
            raise TransportError(f"send_message falhou: {exc}") from exc
        record_latency("transport", "send_message", (time.perf_counter() - start) * 1000)
        logger.info(
            "message_sent",
            extra={
                "client_id": self._client_id,
                "chat": mask_identifier(target),
                "has_media": payload.media is not None,
            },
        )
        return result

    async def get_chats(self) -> list[dict[str, Any]]:
        return await self._require_ready().get_chats()

    async def get_chat_by_id(self, chat_id: str) -> dict[str, Any] | None:
        return await self._require_ready().get_chat_by_id(chat_id)

    async def get_contact_by_id(self, contact_id: str) -> dict[str, Any] | None:
        return await self._require_ready().get_contact_by_id(contact_id)

    async def resend_pairing_challenge(self) -> None:
        """Reenvia o QR vigente ao operador (falha propagada ao chamador)."""
        challenge = self._state.pairing_challenge
        if challenge is None:
            raise PairingRequiredError(f"sem QR code disponível (phase={self.snapshot().phase_name})")
        try:
            await self._notifier.on_pairing_challenge(challenge)
        except Exception as exc:
            raise NotificationFailure(str(exc)) from exc

    # ──────────────────────────────────────────────────────────────────────
    # Consumidor único
    # ──────────────────────────────────────────────────────────────────────

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                stop = await self._dispatch(message)
            finally:
                self._queue.task_done()
            if stop:
                self._reject_pending()
                return

    def _reject_pending(self) -> None:
        """Descarta a fila após o shutdown, falhando comandos ainda pendentes."""
        while not self._queue.empty():
            message = self._queue.get_nowait()
            self._queue.task_done()
            if isinstance(message, _Command) and not message.done.done():
                message.done.set_exception(SupervisorStoppedError("supervisor parado"))

    async def _dispatch(self, message: _TransportMessage | _TimerFired | _Command) -> bool:
        if isinstance(message, _Command):
            return await self._handle_command(message)
        try:
            if isinstance(message, _TimerFired):
                await self._handle_timer(message)
            else:
                await self._handle_transport_event(message)
        except Exception:
            logger.exception("supervisor_message_failed", extra={"client_id": self._client_id})
        return False

    async def _handle_command(self, command: _Command) -> bool:
        if command.event is None:
            try:
                await self._shutdown()
            except Exception as exc:
                logger.exception("supervisor_shutdown_failed", extra={"client_id": self._client_id})
                command.done.set_exception(exc)
            else:
                command.done.set_result(True)
            return True
        try:
            if command.event == LifecycleEvent.RESTART_REQUESTED:
                self._cancel_restart_timer()
                self._policy.reset()
                self._state.halted = False
            accepted = await self._apply(command.event)
            command.done.set_result(accepted)
        except Exception as exc:
            logger.exception("supervisor_command_failed", extra={"client_id": self._client_id})
            command.done.set_exception(exc)
        return False

    async def _handle_timer(self, message: _TimerFired) -> None:
        if message.timer_id != self._timer_seq or self._restart_timer is None:
            logger.debug("restart_timer_stale", extra={"timer_id": message.timer_id})
            return
        self._restart_timer = None
        await self._apply(LifecycleEvent.RESTART_TIMER_FIRED)

    async def _handle_transport_event(self, message: _TransportMessage) -> None:
        if message.generation != self._generation:
            logger.debug(
                "transport_event_stale",
                extra={
                    "client_id": self._client_id,
                    "event_generation": message.generation,
                    "current_generation": self._generation,
                    "kind": message.event.kind.value,
                },
            )
            return

        event = message.event
        if event.kind == TransportEventKind.MESSAGE_RECEIVED:
            self._dispatch_inbound(event.message)
            return
        if event.kind == TransportEventKind.SESSION_SAVED:
            if event.blob is not None:
                self._background.spawn(self._persist_session(event.blob), name="session_save")
            return

        lifecycle_event = _TRANSPORT_EVENT_MAP[event.kind]
        reason = event.reason
        if (
            lifecycle_event == LifecycleEvent.DISCONNECTED
            and self._state.phase in _PRE_READY_PHASES
        ):
            lifecycle_event = LifecycleEvent.INITIALIZATION_ERROR
            reason = f"disconnected: {reason or 'unknown'}"

        await self._apply(lifecycle_event, challenge=event.challenge, reason=reason)

    # ──────────────────────────────────────────────────────────────────────
    # Transições e efeitos colaterais
    # ──────────────────────────────────────────────────────────────────────

    async def _apply(
        self,
        event: LifecycleEvent,
        *,
        challenge: str | None = None,
        reason: str | None = None,
    ) -> bool:
        from_phase = self._fsm.current_state
        metadata: dict[str, Any] = {"generation": self._generation}
        if reason:
            metadata["reason"] = reason

        result = self._fsm.apply(event, context=self._state, metadata=metadata)
        if not result.success or result.transition is None:
            logger.warning(
                "supervisor_event_ignored",
                extra={
                    "client_id": self._client_id,
                    "phase": from_phase.value if from_phase else None,
                    "event": event.value,
                    "reason": result.error_reason,
                },
            )
            return False

        transition = result.transition
        self._state.phase = transition.to_state
        self._state.last_transition_at = transition.timestamp
        if transition.to_state != ConnectionPhase.AWAITING_PAIRING:
            self._state.pairing_challenge = None
        record_transition(
            self._client_id,
            from_phase.value if from_phase else None,
            transition.to_state.value,
            event.value,
        )
        logger.info(
            "supervisor_transition",
            extra={"client_id": self._client_id, **transition.to_log_dict()},
        )

        if event == LifecycleEvent.PAIRING_CHALLENGE:
            self._state.pairing_challenge = challenge or ""
            self._background.spawn(
                safe_notify("on_pairing_challenge", self._notifier.on_pairing_challenge(challenge or "")),
                name="notify_pairing_challenge",
            )
        elif event == LifecycleEvent.READY:
            self._state.retry_count = 0
            self._state.last_reason = None
            self._background.spawn(
                safe_notify("on_ready", self._notifier.on_ready()),
                name="notify_ready",
            )
        elif event in FAILURE_EVENTS:
            await self._on_failure(event, reason or event.value)
        elif event in START_EVENTS:
            await self._restart_client(first_start=event == LifecycleEvent.START_REQUESTED)

        return True

    async def _on_failure(self, event: LifecycleEvent, reason: str) -> None:
        self._state.last_reason = reason
        error = _FAILURE_ERRORS.get(event, GatewayError)(reason)
        logger.warning(
            "connection_failure",
            extra={
                "client_id": self._client_id,
                "error_type": type(error).__name__,
                "reason": str(error),
            },
        )

        if event == LifecycleEvent.AUTH_FAILURE:
            await self._clear_session()

        notify_reason = reason if event == LifecycleEvent.DISCONNECTED else f"{event.value}: {reason}"
        self._background.spawn(
            safe_notify("on_disconnected", self._notifier.on_disconnected(notify_reason)),
            name="notify_disconnected",
        )

        if not self._policy.allows_restart():
            await self._halt()
            return

        self._schedule_restart(self._policy.delay_for(event), cause=event)

    async def _halt(self) -> None:
        self._cancel_restart_timer()
        await self._apply(LifecycleEvent.RESTART_LIMIT_REACHED, reason=RESTART_LIMIT_REASON)
        self._state.halted = True
        await self._teardown()
        record_restart(
            "halted",
            self._state.retry_count,
            metadata={"recent_restarts": self._policy.recent_restarts()},
        )
        logger.error(
            "supervisor_halted",
            extra={
                "client_id": self._client_id,
                "retry_count": self._state.retry_count,
                "last_reason": self._state.last_reason,
            },
        )
        self._background.spawn(
            safe_notify("on_disconnected", self._notifier.on_disconnected(RESTART_LIMIT_REASON)),
            name="notify_halted",
        )

    async def _restart_client(self, *, first_start: bool) -> None:
        if not first_start:
            self._state.retry_count += 1
            self._policy.record_restart()
            record_restart("executed", self._state.retry_count)
        await self._teardown()
        await self._spawn_client()

    # ──────────────────────────────────────────────────────────────────────
    # Timer de restart
    # ──────────────────────────────────────────────────────────────────────

    def _schedule_restart(self, delay_seconds: float, *, cause: LifecycleEvent) -> None:
        self._cancel_restart_timer()
        self._timer_seq += 1
        self._restart_timer = asyncio.create_task(
            self._restart_after(self._timer_seq, delay_seconds),
            name=f"restart_timer:{self._client_id}",
        )
        record_restart(
            "scheduled",
            self._state.retry_count,
            delay_seconds=delay_seconds,
            metadata={"cause": cause.value},
        )

    async def _restart_after(self, timer_id: int, delay_seconds: float) -> None:
        await asyncio.sleep(delay_seconds)
        self._queue.put_nowait(_TimerFired(timer_id))

    def _cancel_restart_timer(self) -> None:
        timer = self._restart_timer
        if timer is None:
            return
        self._restart_timer = None
        self._timer_seq += 1
        timer.cancel()
        record_restart("cancelled", self._state.retry_count)

    # ──────────────────────────────────────────────────────────────────────
    # Cliente de transporte
    # ──────────────────────────────────────────────────────────────────────

    def _emit(self, generation: int, event: TransportEvent) -> None:
        self._queue.put_nowait(_TransportMessage(generation=generation, event=event))

    async def _spawn_client(self) -> None:
        generation = self._generation
        try:
            blob = await self._session_store.load(self._client_id)
        except Exception as exc:
            error = InitializationError(f"session_store.load falhou: {exc}")
            logger.error(
                "session_load_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )
            await self._apply(LifecycleEvent.INITIALIZATION_ERROR, reason=str(error))
            return

        try:
            transport = self._transport_factory(
                self._client_id, blob, partial(self._emit, generation)
            )
        except Exception as exc:
            error = InitializationError(f"transport_factory falhou: {exc}")
            logger.error(
                "transport_construct_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )
            await self._apply(LifecycleEvent.INITIALIZATION_ERROR, reason=str(error))
            return

        self._transport = transport
        self._init_task = asyncio.create_task(
            self._initialize(transport, generation),
            name=f"transport_init:{self._client_id}:{generation}",
        )
        logger.info(
            "transport_created",
            extra={
                "client_id": self._client_id,
                "generation": generation,
                "session_restored": blob is not None,
            },
        )

    async def _initialize(self, transport: TransportClientProtocol, generation: int) -> None:
        try:
            await transport.initialize()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error(
                "transport_initialize_failed",
                extra={
                    "client_id": self._client_id,
                    "generation": generation,
                    "error_type": type(exc).__name__,
                },
            )
            self._emit(
                generation,
                TransportEvent.failure(TransportEventKind.INITIALIZATION_ERROR, str(exc)),
            )

    async def _teardown(self) -> None:
        """Destrói o cliente atual e aguarda a conclusão antes de retornar."""
        transport = self._transport
        self._transport = None
        self._generation += 1

        init_task = self._init_task
        self._init_task = None
        if init_task is not None and not init_task.done():
            init_task.cancel()
            await asyncio.gather(init_task, return_exceptions=True)

        if transport is None:
            return
        try:
            await transport.destroy()
        except Exception as exc:
            logger.warning(
                "transport_destroy_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )
        logger.info(
            "transport_destroyed",
            extra={"client_id": self._client_id, "generation": self._generation - 1},
        )

    async def _shutdown(self) -> None:
        self._cancel_restart_timer()
        await self._teardown()

    # ──────────────────────────────────────────────────────────────────────
    # Persistência e mensagens recebidas
    # ──────────────────────────────────────────────────────────────────────

    async def _persist_session(self, blob: SessionBlob) -> None:
        saved = await self._session_store.save(self._client_id, blob)
        if saved:
            logger.info("session_saved", extra={"client_id": self._client_id})
        else:
            logger.warning("session_save_failed", extra={"client_id": self._client_id})

    async def _clear_session(self) -> None:
        try:
            await self._session_store.clear(self._client_id)
        except Exception as exc:
            logger.warning(
                "session_clear_failed",
                extra={"client_id": self._client_id, "error_type": type(exc).__name__},
            )

    def _dispatch_inbound(self, message: InboundMessage | None) -> None:
        if message is None or message.from_me:
            return
        for handler in self._inbound_handlers:
            self._background.spawn(
                self._run_inbound_handler(handler, message),
                name=f"inbound:{handler.name}",
            )

    async def _run_inbound_handler(
        self, handler: InboundHandlerProtocol, message: InboundMessage
    ) -> None:
        try:
            await handler.handle(message)
        except Exception as exc:
            logger.warning(
                "inbound_handler_failed",
                extra={
                    "handler": handler.name,
                    "message_id": message.message_id,
                    "error_type": type(exc).__name__,
                },
            )
