"""Notifier que repassa para vários notifiers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from app.protocols.notifier import NotifierProtocol
from utils.errors import NotificationFailure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence


class CompositeNotifier(NotifierProtocol):
    """Chama todos os notifiers; falhas são agregadas em NotificationFailure."""

    def __init__(self, notifiers: Sequence[NotifierProtocol]) -> None:
        self._notifiers = list(notifiers)

    async def _fan_out(self, call: Callable[[NotifierProtocol], Awaitable[None]]) -> None:
        results = await asyncio.gather(
            *(call(notifier) for notifier in self._notifiers),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            raise NotificationFailure("; ".join(str(e) for e in errors))

    async def on_pairing_challenge(self, challenge: str) -> None:
        await self._fan_out(lambda n: n.on_pairing_challenge(challenge))

    async def on_ready(self) -> None:
        await self._fan_out(lambda n: n.on_ready())

    async def on_disconnected(self, reason: str) -> None:
        await self._fan_out(lambda n: n.on_disconnected(reason))

    async def send_test(self) -> None:
        await self._fan_out(lambda n: n.send_test())
