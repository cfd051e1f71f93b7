"""Configuration data models for the hybrid translator.

Each dataclass mirrors one section of ``translator.ini``. Field names are upper case so that
they match the INI keys one to one; the loader coerces every value to the type of the default.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Cache",
    "Config",
    "General",
    "Metrics",
    "ProviderSettings",
    "Translation",
]

HF_INFERENCE_URL: str = "https://api-inference.huggingface.co"


@dataclass
class General:
    DEBUG: bool = False
    LOG_FILE: str = ""
    LOG_LEVEL: str = "INFO"
    SCRIPT_NAME: str = ""


@dataclass
class Translation:
    ENGINE: list[str] = field(default_factory=lambda: ["libretranslate", "nllb", "opus_mt", "m2m100"])
    DEFAULT_SOURCE_LANGUAGE: str = "en"
    QUALITY_THRESHOLD: float = 0.5
    BATCH_CONCURRENCY: int = 5
    BUNDLE_CHUNK_SIZE: int = 10
    COALESCE_INFLIGHT: bool = True


@dataclass
class Cache:
    ENABLED: bool = True
    VERSION: str = "1.0.0"
    TTL_DAYS: int = 30
    MAX_MEMORY_ENTRIES: int = 10000
    DB_PATH: str = "translation_cache.db"


@dataclass
class Metrics:
    CAPACITY: int = 10000
    MAX_ERROR_RATE: float = 0.1
    MAX_PROVIDER_ERROR_RATE: float = 0.2
    MAX_AVERAGE_LATENCY_MS: float = 10000.0
    MIN_CACHE_HIT_RATE: float = 0.3


@dataclass
class ProviderSettings:
    URL: str = ""
    TIMEOUT: float = 10.0
    PRIORITY: int = 0
    BATCH_SIZE: int = 1


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    TRANSLATION: Translation = field(default_factory=Translation)
    CACHE: Cache = field(default_factory=Cache)
    METRICS: Metrics = field(default_factory=Metrics)
    LIBRETRANSLATE: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(TIMEOUT=10.0, PRIORITY=4, BATCH_SIZE=50)
    )
    NLLB: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(URL=HF_INFERENCE_URL, TIMEOUT=15.0, PRIORITY=3, BATCH_SIZE=10)
    )
    OPUS_MT: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(URL=HF_INFERENCE_URL, TIMEOUT=12.0, PRIORITY=2, BATCH_SIZE=5)
    )
    M2M100: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(URL=HF_INFERENCE_URL, TIMEOUT=15.0, PRIORITY=1, BATCH_SIZE=5)
    )
    DEEPL: ProviderSettings = field(
        default_factory=lambda: ProviderSettings(TIMEOUT=10.0, PRIORITY=0, BATCH_SIZE=50)
    )
