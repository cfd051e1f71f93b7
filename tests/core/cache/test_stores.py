"""Tests for the memory and SQLite cache tiers."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import pytest

from core.cache.kv_store import SQLiteKeyValueStore
from core.cache.memory_store import MemoryCacheStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


@pytest.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SQLiteKeyValueStore]:
    store = SQLiteKeyValueStore(tmp_path / "kv.db")
    await store.open()
    yield store
    await store.close()


@pytest.mark.asyncio
async def test_memory_store_set_get_delete() -> None:
    store = MemoryCacheStore()

    assert await store.set("a", "1", 60) is True
    assert await store.get("a") == "1"

    await store.delete("a")
    assert await store.get("a") is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_memory_store_evicts_oldest_when_full() -> None:
    store = MemoryCacheStore(max_entries=2)

    await store.set("a", "1", 60)
    await store.set("b", "2", 60)
    await store.set("c", "3", 60)

    assert len(store) == 2
    assert await store.get("a") is None
    assert await store.get("b") == "2"
    assert await store.get("c") == "3"


@pytest.mark.asyncio
async def test_memory_store_overwrite_does_not_evict() -> None:
    store = MemoryCacheStore(max_entries=2)

    await store.set("a", "1", 60)
    await store.set("b", "2", 60)
    await store.set("a", "updated", 60)

    assert await store.get("a") == "updated"
    assert await store.get("b") == "2"


@pytest.mark.asyncio
async def test_memory_store_expired_entries_are_dropped() -> None:
    store = MemoryCacheStore()

    await store.set("old", "x", 0)
    await store.set("live", "y", 60)

    assert await store.purge_expired() == 1
    assert await store.get("old") is None
    assert await store.get("live") == "y"


@pytest.mark.asyncio
async def test_memory_store_delete_matching() -> None:
    store = MemoryCacheStore()
    for key in ("translation:en:ja:1", "translation:en:ja:2", "translation:en:fr:1"):
        await store.set(key, "v", 60)

    removed: int = await store.delete_matching(lambda key: key.split(":")[2] == "ja")

    assert removed == 2
    assert len(store) == 1


def test_memory_store_invalid_capacity_uses_default() -> None:
    assert MemoryCacheStore(0).max_entries == MemoryCacheStore.DEFAULT_MAX_ENTRIES


@pytest.mark.asyncio
async def test_sqlite_store_round_trip(sqlite_store: SQLiteKeyValueStore) -> None:
    assert sqlite_store.is_open is True
    assert await sqlite_store.set("key", '{"text": "Hola"}', 60) is True
    assert await sqlite_store.get("key") == '{"text": "Hola"}'

    await sqlite_store.delete("key")
    assert await sqlite_store.get("key") is None


@pytest.mark.asyncio
async def test_sqlite_store_expired_entry_is_a_miss(sqlite_store: SQLiteKeyValueStore) -> None:
    await sqlite_store.set("stale", "v", 0)

    assert await sqlite_store.get("stale") is None


@pytest.mark.asyncio
async def test_sqlite_store_cleanup_expired(sqlite_store: SQLiteKeyValueStore, tmp_path: Path) -> None:
    await sqlite_store.set("stale", "v", 0)
    await sqlite_store.set("live", "v", 60)

    deleted: int = await sqlite_store.cleanup_expired()

    assert deleted == 1
    with sqlite3.connect(tmp_path / "kv.db") as conn:
        rows = conn.execute("SELECT cache_key FROM kv_cache").fetchall()
    assert rows == [("live",)]


@pytest.mark.asyncio
async def test_sqlite_store_records_schema_version(sqlite_store: SQLiteKeyValueStore, tmp_path: Path) -> None:
    with sqlite3.connect(tmp_path / "kv.db") as conn:
        row = conn.execute("SELECT value FROM cache_metadata WHERE key = 'schema_version'").fetchone()

    assert row == (str(SQLiteKeyValueStore.DB_SCHEMA_VERSION),)


@pytest.mark.asyncio
async def test_sqlite_store_closed_behaves_as_empty(tmp_path: Path) -> None:
    store = SQLiteKeyValueStore(tmp_path / "closed.db")

    assert store.is_open is False
    assert await store.get("key") is None
    assert await store.set("key", "v", 60) is False
    assert await store.cleanup_expired() == 0


@pytest.mark.asyncio
async def test_sqlite_store_open_failure_raises_runtime_error(tmp_path: Path) -> None:
    store = SQLiteKeyValueStore(tmp_path)

    with pytest.raises(RuntimeError, match="Database initialization failed"):
        await store.open()

