"""Translation performance metrics.

Keeps a bounded, process-wide log of provider attempts and cache lookups, and derives aggregate
statistics and a threshold-based degradation signal from it.

Cache lookups are recorded under the pseudo provider ``"cache"``: a hit has ``from_cache=True``,
a miss has ``from_cache=False``. Cache lookups do not count towards error rates, and the cache
hit rate is computed over cache lookups only.
"""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from typing import TYPE_CHECKING, Final

from models.metrics_models import (
    DegradationReport,
    LanguageCount,
    MetricEntry,
    ProviderStats,
    TranslationStats,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from models.config_models import Metrics

__all__: list[str] = ["CACHE_PROVIDER", "MetricsCollector"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

CACHE_PROVIDER: Final[str] = "cache"
SUMMARY_LANGUAGES: Final[int] = 5


def _mean(values: Iterable[float]) -> float:
    items: list[float] = list(values)
    return sum(items) / len(items) if items else 0.0


class MetricsCollector:
    """Thread-safe ring buffer of ``MetricEntry`` records.

    Args:
        settings (Metrics): Capacity and degradation thresholds (``METRICS`` config section).
    """

    def __init__(self, settings: Metrics) -> None:
        self.settings: Metrics = settings
        self._entries: deque[MetricEntry] = deque(maxlen=max(1, settings.CAPACITY))
        self._lock: threading.Lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def record(
        self,
        *,
        provider: str,
        src_lang: str,
        tgt_lang: str,
        response_time_ms: float,
        success: bool,
        error: str | None = None,
        quality_score: float | None = None,
        from_cache: bool = False,
        text_length: int = 0,
    ) -> MetricEntry:
        """Append an entry stamped with the current time; the oldest entry is dropped when full."""
        entry = MetricEntry(
            timestamp=time.time(),
            provider=provider,
            src_lang=src_lang,
            tgt_lang=tgt_lang,
            response_time_ms=response_time_ms,
            success=success,
            error=error,
            quality_score=quality_score,
            from_cache=from_cache,
            text_length=text_length,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    @staticmethod
    def track_start() -> float:
        """Return a start mark for ``track_complete``."""
        return time.perf_counter()

    def track_complete(
        self,
        start: float,
        provider: str,
        src_lang: str,
        tgt_lang: str,
        *,
        success: bool,
        error: str | None = None,
        quality_score: float | None = None,
        from_cache: bool = False,
        text_length: int = 0,
    ) -> MetricEntry:
        """Record an entry whose response time is measured from ``start``."""
        return self.record(
            provider=provider,
            src_lang=src_lang,
            tgt_lang=tgt_lang,
            response_time_ms=(time.perf_counter() - start) * 1000.0,
            success=success,
            error=error,
            quality_score=quality_score,
            from_cache=from_cache,
            text_length=text_length,
        )

    def get_all(self) -> list[MetricEntry]:
        with self._lock:
            return list(self._entries)

    def get_by_provider(self, provider: str) -> list[MetricEntry]:
        return [entry for entry in self.get_all() if entry.provider == provider]

    def get_by_time_range(self, start: float, end: float) -> list[MetricEntry]:
        """Entries whose timestamp (epoch seconds) lies in ``[start, end]``."""
        return [entry for entry in self.get_all() if start <= entry.timestamp <= end]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @staticmethod
    def _build_provider_stats(provider: str, entries: list[MetricEntry]) -> ProviderStats:
        total: int = len(entries)
        successes: int = sum(1 for entry in entries if entry.success)
        failures: int = total - successes
        return ProviderStats(
            provider=provider,
            total_requests=total,
            successful_requests=successes,
            failed_requests=failures,
            average_response_time_ms=_mean(entry.response_time_ms for entry in entries),
            average_quality_score=_mean(
                entry.quality_score for entry in entries if entry.quality_score is not None
            ),
            cache_hit_rate=sum(1 for entry in entries if entry.from_cache) / total if total else 0.0,
            error_rate=failures / total if total else 0.0,
        )

    def get_stats(self, top_n: int = 10) -> TranslationStats:
        """Aggregate the retained entries.

        Args:
            top_n (int): Number of target languages to report, most requested first.

        Returns:
            TranslationStats: Aggregate statistics; all zero for an empty log.
        """
        entries: list[MetricEntry] = self.get_all()
        lookups: list[MetricEntry] = [entry for entry in entries if entry.provider == CACHE_PROVIDER]
        attempts: list[MetricEntry] = [entry for entry in entries if entry.provider != CACHE_PROVIDER]

        cache_hits: int = sum(1 for entry in lookups if entry.from_cache)
        cache_misses: int = len(lookups) - cache_hits
        failures: int = sum(1 for entry in attempts if not entry.success)

        by_provider: dict[str, list[MetricEntry]] = {}
        for entry in attempts:
            by_provider.setdefault(entry.provider, []).append(entry)

        languages: Counter[str] = Counter(entry.tgt_lang for entry in attempts)

        return TranslationStats(
            total_translations=len(attempts),
            cache_hits=cache_hits,
            cache_misses=cache_misses,
            cache_hit_rate=cache_hits / len(lookups) if lookups else 0.0,
            error_rate=failures / len(attempts) if attempts else 0.0,
            average_quality_score=_mean(
                entry.quality_score for entry in entries if entry.quality_score is not None
            ),
            provider_stats={
                provider: self._build_provider_stats(provider, items) for provider, items in by_provider.items()
            },
            # Counter.most_common keeps first-seen order among equal counts.
            top_languages=[LanguageCount(language, count) for language, count in languages.most_common(top_n)],
        )

    def get_provider_stats(self, provider: str) -> ProviderStats | None:
        entries: list[MetricEntry] = self.get_by_provider(provider)
        if not entries:
            return None
        return self._build_provider_stats(provider, entries)

    def check_performance_degradation(self) -> DegradationReport:
        """Compare the aggregate statistics with the configured thresholds.

        Every comparison is strict, so a value exactly at its threshold is not an issue. The cache hit
        rate is only checked once at least one cache lookup has been recorded.
        """
        stats: TranslationStats = self.get_stats()
        issues: list[str] = []

        if stats.error_rate > self.settings.MAX_ERROR_RATE:
            issues.append(f"High error rate: {stats.error_rate * 100:.1f}%")

        for provider_stats in stats.provider_stats.values():
            if provider_stats.error_rate > self.settings.MAX_PROVIDER_ERROR_RATE:
                issues.append(
                    f"Provider {provider_stats.provider} has high error rate: {provider_stats.error_rate * 100:.1f}%"
                )
            if provider_stats.average_response_time_ms > self.settings.MAX_AVERAGE_LATENCY_MS:
                issues.append(
                    f"Provider {provider_stats.provider} is slow: "
                    f"{provider_stats.average_response_time_ms:.0f}ms average"
                )

        if stats.cache_hits + stats.cache_misses > 0 and stats.cache_hit_rate < self.settings.MIN_CACHE_HIT_RATE:
            issues.append(f"Low cache hit rate: {stats.cache_hit_rate * 100:.1f}%")

        report = DegradationReport(is_degrading=bool(issues), issues=issues)
        if report.is_degrading:
            logger.warning("Translation performance degradation detected: %s", "; ".join(issues))
        return report

    def get_performance_summary(self) -> str:
        stats: TranslationStats = self.get_stats()
        report: DegradationReport = self.check_performance_degradation()

        top: str = ", ".join(f"{item.language} ({item.count})" for item in stats.top_languages[:SUMMARY_LANGUAGES])
        lines: list[str] = [
            "Translation Performance Summary:",
            f"  Total translations: {stats.total_translations}",
            f"  Cache hit rate: {stats.cache_hit_rate * 100:.1f}%",
            f"  Error rate: {stats.error_rate * 100:.1f}%",
            f"  Average quality score: {stats.average_quality_score:.2f}",
            f"  Top languages: {top or '-'}",
        ]
        if report.is_degrading:
            lines.append("  Performance issues detected:")
            lines.extend(f"    - {issue}" for issue in report.issues)
        return "\n".join(lines)
