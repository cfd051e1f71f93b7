from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable


__all__: list[str] = ["MemoryCacheStore"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class MemoryCacheStore:
    """Bounded in-process key/value store with per-entry expiry.

    Entries are kept in insertion order. When the store is full, the oldest inserted entry is
    evicted to make room. Expired entries are dropped lazily on read and by ``purge_expired``.

    Attributes:
        DEFAULT_MAX_ENTRIES (ClassVar[int]): Capacity used when none is given.
    """

    DEFAULT_MAX_ENTRIES: ClassVar[int] = 10000

    def __init__(self, max_entries: int | None = None) -> None:
        self.max_entries: int = max_entries if max_entries and max_entries > 0 else self.DEFAULT_MAX_ENTRIES
        self._entries: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._lock: asyncio.Lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            item: tuple[str, float] | None = self._entries.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at <= time.time():
                del self._entries[key]
                logger.debug("Memory cache entry expired for key: %s", key[:48])
                return None
            return value

    async def set(self, key: str, value: str, ttl_seconds: float) -> bool:
        async with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Memory cache full, evicted key: %s", evicted[:48])
            self._entries[key] = (value, time.time() + ttl_seconds)
            return True

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def delete_matching(self, predicate: Callable[[str], bool]) -> int:
        """Delete every entry whose key satisfies ``predicate``.

        Returns:
            int: Number of deleted entries.
        """
        async with self._lock:
            doomed: list[str] = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    async def purge_expired(self) -> int:
        now: float = time.time()
        return await self.delete_matching(lambda key: self._entries[key][1] <= now)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
