"""Testes do MemorySessionStore."""

from __future__ import annotations

import pytest

from app.infra.stores import MemorySessionStore


@pytest.mark.asyncio
async def test_save_then_load() -> None:
    store = MemorySessionStore()

    assert await store.save("c1", "blob") is True
    assert await store.load("c1") == "blob"
    assert store.exists("c1")


@pytest.mark.asyncio
async def test_load_missing_returns_none() -> None:
    assert await MemorySessionStore().load("nope") is None


@pytest.mark.asyncio
async def test_clear_removes_blob() -> None:
    store = MemorySessionStore()
    await store.save("c1", "blob")

    await store.clear("c1")
    await store.clear("c1")

    assert await store.load("c1") is None


@pytest.mark.asyncio
async def test_expired_blob_is_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    now = [1000.0]
    monkeypatch.setattr("app.infra.stores.memory_stores.time.time", lambda: now[0])
    store = MemorySessionStore(ttl_seconds=10)
    await store.save("c1", "blob")

    now[0] += 11

    assert await store.load("c1") is None
    assert not store.exists("c1")


@pytest.mark.asyncio
async def test_close_is_noop() -> None:
    store = MemorySessionStore()
    await store.save("c1", "blob")

    await store.close()

    assert await store.load("c1") == "blob"


@pytest.mark.asyncio
async def test_ping_is_always_connected() -> None:
    assert await MemorySessionStore().ping() is True
