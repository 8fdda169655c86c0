"""Controle de tasks fire-and-forget do supervisor.

Notificações, persistência de sessão e handlers de mensagens rodam fora
do fluxo de transições; o supervisor mantém referência até concluírem.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Conjunto de tasks em background com drenagem no shutdown."""

    def __init__(self) -> None:
        self._active: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._active)

    def spawn(self, coroutine: Coroutine[Any, Any, None], *, name: str) -> asyncio.Task[Any]:
        """Agenda a coroutine e mantém referência até o fim."""
        task = asyncio.create_task(coroutine, name=name)
        self._active.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._active.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "supervisor_background_task_failed",
                    extra={
                        "task_name": task.get_name(),
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda tasks pendentes; cancela as que excederem o timeout."""
        while True:
            pending_now = [task for task in self._active if not task.done()]
            if not pending_now:
                return
            _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
            if not pending:
                continue

            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "supervisor_background_tasks_cancelled",
                extra={"cancelled_tasks": len(pending)},
            )
            return
