"""Models for translation metrics and performance reports."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "DegradationReport",
    "LanguageCount",
    "MetricEntry",
    "ProviderStats",
    "TranslationStats",
]


@dataclass(frozen=True)
class MetricEntry:
    """One recorded provider attempt or cache lookup.

    Attributes:
        timestamp (float): Epoch seconds at which the entry was recorded.
        provider (str): Provider name, or ``"cache"`` for cache lookups.
        src_lang (str): Source language code.
        tgt_lang (str): Target language code.
        response_time_ms (float): Elapsed time of the attempt.
        success (bool): Whether the attempt produced a translation (or a cache hit).
        error (str | None): Error message for failed attempts.
        quality_score (float | None): Quality score of the produced text.
        from_cache (bool): Whether the translation came from the cache.
        text_length (int): Length of the source text.
    """

    timestamp: float
    provider: str
    src_lang: str
    tgt_lang: str
    response_time_ms: float
    success: bool
    error: str | None = None
    quality_score: float | None = None
    from_cache: bool = False
    text_length: int = 0


@dataclass
class ProviderStats:
    provider: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time_ms: float = 0.0
    average_quality_score: float = 0.0
    cache_hit_rate: float = 0.0
    error_rate: float = 0.0


@dataclass(frozen=True)
class LanguageCount:
    language: str
    count: int


@dataclass
class TranslationStats:
    """Aggregate view over the retained metric entries."""

    total_translations: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_hit_rate: float = 0.0
    error_rate: float = 0.0
    average_quality_score: float = 0.0
    provider_stats: dict[str, ProviderStats] = field(default_factory=dict)
    top_languages: list[LanguageCount] = field(default_factory=list)


@dataclass
class DegradationReport:
    is_degrading: bool = False
    issues: list[str] = field(default_factory=list)
