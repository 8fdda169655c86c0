"""Testes das respostas automáticas a comandos."""

from __future__ import annotations

import logging

import pytest

from app.protocols.models import InboundMessage
from app.services.auto_reply import HELP_TEXT, AutoReplyService
from fsm.states import ConnectionPhase
from tests.fakes.stub_supervisor import StubSupervisor

SENDER = "5511999998888@c.us"


def _message(body: str, sender: str = SENDER) -> InboundMessage:
    return InboundMessage(sender=sender, body=body, message_id="m-1")


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestBuildReply:
    @pytest.mark.asyncio
    async def test_ping_is_case_insensitive(self) -> None:
        service = AutoReplyService(StubSupervisor())

        assert await service.build_reply(_message("  !PING ")) == "🏓 Pong! Bot is active!"

    @pytest.mark.asyncio
    async def test_help(self) -> None:
        service = AutoReplyService(StubSupervisor())

        assert await service.build_reply(_message("!help")) == HELP_TEXT

    @pytest.mark.asyncio
    async def test_time(self) -> None:
        service = AutoReplyService(StubSupervisor())

        reply = await service.build_reply(_message("!time"))

        assert reply is not None
        assert reply.startswith("🕐 Current time: ")
        assert reply.endswith(" UTC")

    @pytest.mark.asyncio
    async def test_status_reports_phase_and_uptime(self) -> None:
        clock = _Clock()
        service = AutoReplyService(StubSupervisor(), email_configured=True, clock=clock)
        clock.now += 185

        reply = await service.build_reply(_message("!status"))

        assert reply is not None
        assert "Ready: ✅" in reply
        assert "Phase: Ready" in reply
        assert "Uptime: 3 minutes" in reply
        assert "Email: ✅ Configured" in reply

    @pytest.mark.asyncio
    async def test_info_uses_contact(self) -> None:
        supervisor = StubSupervisor()
        supervisor.contacts[SENDER] = {"name": "Ana", "number": "5511999998888"}
        service = AutoReplyService(supervisor)

        reply = await service.build_reply(_message("!info"))

        assert reply is not None
        assert "Name: Ana" in reply
        assert "Number: 5511999998888" in reply
        assert "Chat Type: Individual" in reply

    @pytest.mark.asyncio
    async def test_info_for_unknown_group_sender(self) -> None:
        service = AutoReplyService(StubSupervisor())

        reply = await service.build_reply(_message("!info", sender="120363025@g.us"))

        assert reply is not None
        assert "Name: Not saved" in reply
        assert "Number: 120363025" in reply
        assert "Chat Type: Group" in reply

    @pytest.mark.asyncio
    async def test_plain_text_is_not_a_command(self) -> None:
        service = AutoReplyService(StubSupervisor())

        assert await service.build_reply(_message("bom dia")) is None


class TestHandle:
    @pytest.mark.asyncio
    async def test_replies_to_sender(self) -> None:
        supervisor = StubSupervisor()

        await AutoReplyService(supervisor).handle(_message("!ping"))

        assert len(supervisor.sent) == 1
        target, payload = supervisor.sent[0]
        assert target == SENDER
        assert payload.text == "🏓 Pong! Bot is active!"

    @pytest.mark.asyncio
    async def test_ignores_non_commands(self) -> None:
        supervisor = StubSupervisor()

        await AutoReplyService(supervisor).handle(_message("olá"))

        assert supervisor.sent == []

    @pytest.mark.asyncio
    async def test_not_ready_drops_reply(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        supervisor = StubSupervisor(phase=ConnectionPhase.DISCONNECTED)

        await AutoReplyService(supervisor).handle(_message("!ping"))

        assert supervisor.sent == []
        record = next(r for r in caplog.records if r.getMessage() == "auto_reply_skipped")
        assert record.phase == "Disconnected"
