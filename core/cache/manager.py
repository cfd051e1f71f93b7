"""Translation cache manager.

Two-tier cache for translation results: a persistent key/value store (SQLite by default) is
consulted first, then a bounded in-memory store. Writes go to both tiers concurrently. Every entry
carries the cache format version; entries written with another version are treated as misses and
removed from both tiers.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import TYPE_CHECKING, Any, ClassVar

from core.cache.kv_store import SQLiteKeyValueStore
from core.cache.memory_store import MemoryCacheStore
from models.cache_models import CacheEntry, CacheStatistics
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from config.loader import Config
    from core.cache.kv_store import KeyValueStore

__all__: list[str] = ["TranslationCacheManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

SECONDS_PER_DAY: int = 24 * 60 * 60


class TranslationCacheManager:
    """Manager for the two-tier translation cache.

    Tier errors never reach the caller: a failing read is a miss and a failing write is ignored.

    Args:
        config (Config): Application configuration (``CACHE`` section).
        kv_store (KeyValueStore | None): Persistent tier. When None, a SQLite store at
            ``CACHE.DB_PATH`` is opened by ``component_load``.

    Attributes:
        KEY_PREFIX (ClassVar[str]): Namespace of every cache key.
    """

    KEY_PREFIX: ClassVar[str] = "translation"

    def __init__(self, config: Config, kv_store: KeyValueStore | None = None) -> None:
        self.config: Config = config
        self._enabled: bool = config.CACHE.ENABLED
        self._version: str = config.CACHE.VERSION
        self._ttl_seconds: int = config.CACHE.TTL_DAYS * SECONDS_PER_DAY
        self._db_path: Path = FileUtils.resolve_path(config.CACHE.DB_PATH)
        self._kv_store: KeyValueStore | None = kv_store
        self._owns_kv_store: bool = kv_store is None
        self._memory: MemoryCacheStore = MemoryCacheStore(config.CACHE.MAX_MEMORY_ENTRIES)
        self._is_initialized: bool = False
        logger.debug("TranslationCacheManager instance created")

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def version(self) -> str:
        return self._version

    async def component_load(self) -> None:
        """Open the persistent tier.

        A persistent tier that cannot be opened leaves the cache running on the memory tier alone.
        """
        logger.info("TranslationCacheManager initialization started")
        if not self._enabled:
            logger.info("Translation cache is disabled by configuration")
            self._is_initialized = True
            return

        if self._kv_store is None:
            store = SQLiteKeyValueStore(self._db_path)
            try:
                FileUtils.ensure_parent_dir(self._db_path)
                await store.open()
            except (OSError, RuntimeError) as err:
                logger.critical("Persistent cache unavailable, using memory cache only: %s", err)
            else:
                self._kv_store = store
        self._is_initialized = True
        logger.info("TranslationCacheManager initialized successfully")

    async def component_teardown(self) -> None:
        logger.info("TranslationCacheManager shutdown started")
        if self._owns_kv_store and isinstance(self._kv_store, SQLiteKeyValueStore):
            await self._kv_store.close()
            self._kv_store = None
        await self._memory.clear()
        self._is_initialized = False
        logger.info("TranslationCacheManager shutdown completed")

    @classmethod
    def build_cache_key(cls, source_text: str, source_lang: str, target_lang: str) -> str:
        """Build the cache key ``translation:{src}:{tgt}:{sha256}``."""
        return StringUtils.generate_translation_key(source_text, source_lang, target_lang)

    def _tiers(self) -> list[KeyValueStore]:
        tiers: list[KeyValueStore] = []
        if self._kv_store is not None:
            tiers.append(self._kv_store)
        tiers.append(self._memory)
        return tiers

    @staticmethod
    def _parse_entry(raw: str) -> CacheEntry:
        data: Any = json.loads(raw)
        if not isinstance(data, dict):
            msg: str = f"expected a JSON object, got {type(data).__name__}"
            raise TypeError(msg)
        text: Any = data.get("text")
        if not isinstance(text, str) or not text.strip():
            msg = "entry has no translated text"
            raise ValueError(msg)
        return CacheEntry.from_dict(data, infer_missing=True)

    def _decode_entry(self, raw: str, cache_key: str) -> CacheEntry | None:
        try:
            return self._parse_entry(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as err:
            logger.warning("Discarding malformed cache entry for key %s: %s", cache_key[:48], err)
            return None

    async def get_entry(self, source_text: str, source_lang: str, target_lang: str) -> CacheEntry | None:
        """Look up a cache entry, persistent tier first.

        Returns:
            CacheEntry | None: The entry on a hit, None on a miss, a stale version or a tier error.
        """
        if not self._enabled:
            return None

        cache_key: str = self.build_cache_key(source_text, source_lang, target_lang)
        for tier in self._tiers():
            try:
                raw: str | None = await tier.get(cache_key)
            except Exception as err:  # noqa: BLE001
                logger.error("Error reading cache tier %s: %s", type(tier).__name__, err)
                continue
            if raw is None:
                continue

            entry: CacheEntry | None = self._decode_entry(raw, cache_key)
            if entry is None or entry.version != self._version:
                logger.debug(
                    "Cache entry version mismatch or unreadable for key %s (entry: %s, current: %s)",
                    cache_key[:48],
                    entry.version if entry else None,
                    self._version,
                )
                await self._delete_key(cache_key)
                return None

            logger.debug("Cache hit (%s) for key: %s", type(tier).__name__, cache_key[:48])
            return entry

        logger.debug("Cache miss for key: %s", cache_key[:48])
        return None

    async def get(self, source_text: str, source_lang: str, target_lang: str) -> str | None:
        entry: CacheEntry | None = await self.get_entry(source_text, source_lang, target_lang)
        return entry.text if entry is not None else None

    async def has(self, source_text: str, source_lang: str, target_lang: str) -> bool:
        return await self.get_entry(source_text, source_lang, target_lang) is not None

    async def set(
        self,
        source_text: str,
        source_lang: str,
        target_lang: str,
        translated_text: str,
        *,
        provider: str | None = None,
        quality_score: float | None = None,
    ) -> None:
        """Write a translation to both tiers concurrently."""
        if not self._enabled:
            return

        cache_key: str = self.build_cache_key(source_text, source_lang, target_lang)
        entry = CacheEntry(
            text=translated_text,
            timestamp=int(time.time() * 1000),
            version=self._version,
            provider=provider,
            quality_score=quality_score,
        )
        raw: str = entry.to_json(ensure_ascii=False)
        results: list[bool | BaseException] = await asyncio.gather(
            *(tier.set(cache_key, raw, self._ttl_seconds) for tier in self._tiers()),
            return_exceptions=True,
        )
        for tier, result in zip(self._tiers(), results, strict=False):
            if isinstance(result, BaseException):
                logger.error("Error writing cache tier %s: %s", type(tier).__name__, result)
        logger.debug("Translation cached for key: %s", cache_key[:48])

    async def delete(self, source_text: str, source_lang: str, target_lang: str) -> None:
        await self._delete_key(self.build_cache_key(source_text, source_lang, target_lang))

    async def _delete_key(self, cache_key: str) -> None:
        await asyncio.gather(*(tier.delete(cache_key) for tier in self._tiers()), return_exceptions=True)

    async def get_batch(self, source_texts: Iterable[str], source_lang: str, target_lang: str) -> dict[str, str]:
        """Look up many source texts concurrently.

        Returns:
            dict[str, str]: Translations keyed by source text; misses are absent.
        """
        texts: list[str] = list(dict.fromkeys(source_texts))
        translations: list[str | None] = await asyncio.gather(
            *(self.get(text, source_lang, target_lang) for text in texts)
        )
        return {
            text: translated for text, translated in zip(texts, translations, strict=True) if translated is not None
        }

    async def set_batch(
        self,
        translations: Mapping[str, str],
        source_lang: str,
        target_lang: str,
        *,
        provider: str | None = None,
    ) -> None:
        """Write many (source text -> translation) pairs concurrently."""
        await asyncio.gather(
            *(
                self.set(source, source_lang, target_lang, translated, provider=provider)
                for source, translated in translations.items()
            )
        )

    async def invalidate_language(self, target_lang: str) -> int:
        """Drop memory-tier entries for a target language.

        Persistent entries are left to expire by TTL or version.

        Returns:
            int: Number of removed entries.
        """
        removed: int = await self._memory.delete_matching(
            lambda key: key.startswith(f"{self.KEY_PREFIX}:") and key.split(":")[2] == target_lang
        )
        logger.info("Invalidated %d memory cache entries for target language '%s'", removed, target_lang)
        return removed

    async def invalidate_all(self) -> None:
        """Clear the memory tier. Persistent entries are left to expire by TTL or version."""
        await self._memory.clear()
        logger.info("Memory cache cleared")

    async def cleanup_expired_entries(self) -> None:
        """Remove expired entries from both tiers."""
        if isinstance(self._kv_store, SQLiteKeyValueStore):
            await self._kv_store.cleanup_expired()
        removed: int = await self._memory.purge_expired()
        logger.info("Deleted %d expired memory cache entries", removed)

    def get_statistics(self) -> CacheStatistics:
        return CacheStatistics(
            memory_cache_size=len(self._memory),
            persistent_available=self._kv_store is not None,
            enabled=self._enabled,
            version=self._version,
        )
