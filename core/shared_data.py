"""Shared service container for the hybrid translator.

This module defines the SharedData class, which owns the translation cache, in-flight request
manager, metrics collector and translation orchestrator, and drives their start-up and shutdown
in dependency order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCacheManager
from core.metrics.collector import MetricsCollector
from core.trans.manager import TransManager
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["SharedData"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class SharedData:
    _config: Config = field()
    _cache_manager: TranslationCacheManager = field(init=False)
    _inflight_manager: InFlightManager = field(init=False)
    _metrics_collector: MetricsCollector = field(init=False)
    _trans_manager: TransManager = field(init=False)

    async def async_init(self) -> None:
        self._cache_manager = TranslationCacheManager(self.config)
        self._inflight_manager = InFlightManager()
        self._metrics_collector = MetricsCollector(self.config.METRICS)
        self._trans_manager = TransManager(
            self.config, self._cache_manager, self._inflight_manager, self._metrics_collector
        )

    async def component_load(self) -> None:
        """Open the cache, start in-flight tracking and initialise the providers."""
        await self._cache_manager.component_load()
        await self._inflight_manager.component_load()
        await self._trans_manager.initialize()
        logger.info("Translation services ready: %s", self._trans_manager.fetch_engine_names())

    async def component_teardown(self) -> None:
        """Shut down in reverse order of ``component_load``."""
        await self._trans_manager.shutdown_engines()
        await self._inflight_manager.component_teardown()
        await self._cache_manager.component_teardown()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cache_manager(self) -> TranslationCacheManager:
        return self._cache_manager

    @property
    def inflight_manager(self) -> InFlightManager:
        return self._inflight_manager

    @property
    def metrics_collector(self) -> MetricsCollector:
        return self._metrics_collector

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager
