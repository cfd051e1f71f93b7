"""Data models for the hybrid translator.

This package contains dataclass definitions for configuration, translation requests and outcomes,
cache entries, quality scores, metrics, language metadata and the regular expression patterns used
throughout the application.
"""

from __future__ import annotations

from models.cache_models import CacheEntry, CacheStatistics
from models.config_models import Config
from models.language_models import LanguageInfo, LanguageValidation
from models.metrics_models import DegradationReport, MetricEntry, ProviderStats, TranslationStats
from models.quality_models import QualityMetrics, QualityScore, ScoredCandidate
from models.re_models import (
    EVENT_HANDLER_ATTRIBUTE_PATTERN,
    LANGUAGE_CODE_PATTERN,
    SCRIPT_BLOCK_PATTERN,
)
from models.translation_models import ProviderResult, TranslationOutcome, TranslationRequest

__all__: list[str] = [
    "EVENT_HANDLER_ATTRIBUTE_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "SCRIPT_BLOCK_PATTERN",
    "CacheEntry",
    "CacheStatistics",
    "Config",
    "DegradationReport",
    "LanguageInfo",
    "LanguageValidation",
    "MetricEntry",
    "ProviderResult",
    "ProviderStats",
    "QualityMetrics",
    "QualityScore",
    "ScoredCandidate",
    "TranslationOutcome",
    "TranslationRequest",
    "TranslationStats",
]
