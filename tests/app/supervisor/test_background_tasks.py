"""Testes do BackgroundTasks (fire-and-forget com drenagem)."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.supervisor.tasks import BackgroundTasks


@pytest.mark.asyncio
async def test_drain_waits_for_tasks() -> None:
    tasks = BackgroundTasks()
    done: list[str] = []

    async def _work() -> None:
        await asyncio.sleep(0.01)
        done.append("ok")

    tasks.spawn(_work(), name="work")
    await tasks.drain(timeout_seconds=1.0)

    assert done == ["ok"]
    assert len(tasks) == 0


@pytest.mark.asyncio
async def test_drain_cancels_slow_tasks() -> None:
    tasks = BackgroundTasks()
    started = asyncio.Event()

    async def _slow() -> None:
        started.set()
        await asyncio.sleep(10)

    task = tasks.spawn(_slow(), name="slow")
    await started.wait()
    await tasks.drain(timeout_seconds=0.01)

    assert task.cancelled()
    assert len(tasks) == 0


@pytest.mark.asyncio
async def test_failed_task_is_logged_and_released(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    tasks = BackgroundTasks()

    async def _boom() -> None:
        raise RuntimeError("boom")

    tasks.spawn(_boom(), name="boom")
    await tasks.drain(timeout_seconds=1.0)

    assert len(tasks) == 0
    assert any(r.getMessage() == "supervisor_background_task_failed" for r in caplog.records)
