"""Testes do envio em massa (send-bulk)."""

from __future__ import annotations

import pytest

from app.protocols.models import OutboundPayload
from app.services.bulk_sender import BulkSendReport, RecipientResult, send_bulk
from fsm.states import ConnectionPhase
from tests.fakes.stub_supervisor import StubSupervisor

PAYLOAD = OutboundPayload(text="promo")


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_sends_in_order_with_delay_between_recipients() -> None:
    supervisor = StubSupervisor()
    sleeps = _Sleeps()

    report = await send_bulk(
        supervisor, ["5511911111111", "5511922222222", "5511933333333"], PAYLOAD,
        delay_ms=1500, sleep=sleeps,
    )

    assert [target for target, _ in supervisor.sent] == [
        "5511911111111@c.us",
        "5511922222222@c.us",
        "5511933333333@c.us",
    ]
    assert sleeps.calls == [1.5, 1.5]
    assert report.successful == 3
    assert report.failed == 0


@pytest.mark.asyncio
async def test_failures_do_not_stop_remaining_recipients() -> None:
    supervisor = StubSupervisor()
    supervisor.fail_for = {"5511922222222@c.us"}

    report = await send_bulk(
        supervisor, ["5511911111111", "5511922222222", "abc", "5511933333333"], PAYLOAD,
        delay_ms=0, sleep=_Sleeps(),
    )

    data = report.to_dict()
    assert data["total"] == 4
    assert data["successful"] == 2
    assert data["failed"] == 2
    assert data["results"][0] == {"to": "5511911111111@c.us", "success": True, "messageId": "msg-1"}
    assert data["results"][1]["to"] == "5511922222222"
    assert data["results"][1]["success"] is False
    assert data["results"][2] == {"to": "abc", "success": False, "error": "número inválido"}


@pytest.mark.asyncio
async def test_not_ready_marks_every_recipient_failed() -> None:
    supervisor = StubSupervisor(phase=ConnectionPhase.AWAITING_PAIRING)

    report = await send_bulk(supervisor, ["5511911111111", "5511922222222"], PAYLOAD, delay_ms=0)

    assert report.failed == 2
    assert all("AwaitingPairing" in (r.error or "") for r in report.results)


def test_report_without_results() -> None:
    assert BulkSendReport().to_dict() == {"results": [], "total": 0, "successful": 0, "failed": 0}


def test_recipient_result_omits_empty_fields() -> None:
    assert RecipientResult(to="x@c.us", success=True).to_dict() == {"to": "x@c.us", "success": True}


class _DropsAfterFirstSend(StubSupervisor):
    async def request_send(self, target, payload):  # noqa: ANN001, ANN201
        result = await super().request_send(target, payload)
        self.phase = ConnectionPhase.DISCONNECTED
        return result


@pytest.mark.asyncio
async def test_remaining_recipients_fail_without_delay_once_not_ready() -> None:
    supervisor = _DropsAfterFirstSend()
    sleeps = _Sleeps()

    report = await send_bulk(
        supervisor, ["5511911111111", "5511922222222", "5511933333333"], PAYLOAD,
        delay_ms=2000, sleep=sleeps,
    )

    assert sleeps.calls == [2.0]
    assert len(supervisor.sent) == 1
    assert [r.success for r in report.results] == [True, False, False]
    assert all("Disconnected" in (r.error or "") for r in report.results[1:])
