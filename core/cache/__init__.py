"""Translation cache package.

Provides the two-tier translation cache, its storage tiers and in-flight request coalescing.
"""

from __future__ import annotations

from core.cache.inflight_manager import InFlightManager
from core.cache.kv_store import KeyValueStore, SQLiteKeyValueStore
from core.cache.manager import TranslationCacheManager
from core.cache.memory_store import MemoryCacheStore

__all__: list[str] = [
    "InFlightManager",
    "KeyValueStore",
    "MemoryCacheStore",
    "SQLiteKeyValueStore",
    "TranslationCacheManager",
]
