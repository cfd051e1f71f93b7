"""Models for translation cache data.

Defines the serialised cache entry and the statistics snapshot reported by the cache manager.
"""

from __future__ import annotations

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = ["CacheEntry", "CacheStatistics"]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class CacheEntry(DataClassJsonMixin):
    """Translation cache entry as stored in both cache tiers.

    Serialised with camelCase keys, e.g. ``{"text": ..., "timestamp": ..., "qualityScore": ...}``.

    Attributes:
        text (str): Translated text.
        timestamp (int): Creation time in epoch milliseconds.
        version (str): Cache format version the entry was written with.
        provider (str | None): Provider that produced the translation.
        quality_score (float | None): Quality score of the translation when it was selected.
    """

    text: str
    timestamp: int
    version: str
    provider: str | None = None
    quality_score: float | None = None


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        memory_cache_size (int): Number of entries held in the memory tier.
        persistent_available (bool): Whether the persistent tier is open.
        enabled (bool): Whether caching is enabled at all.
        version (str): Current cache format version.
    """

    memory_cache_size: int = 0
    persistent_available: bool = False
    enabled: bool = False
    version: str = ""
