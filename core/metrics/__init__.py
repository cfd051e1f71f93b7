"""Translation performance metrics."""

from core.metrics.collector import CACHE_PROVIDER, MetricsCollector

__all__: list[str] = ["CACHE_PROVIDER", "MetricsCollector"]
