"""Unit tests for core.trans.manager module."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import pytest

from config.loader import Config
from core.cache.inflight_manager import InFlightManager
from core.cache.manager import TranslationCacheManager
from core.cache.memory_store import MemoryCacheStore
from core.trans.interface import (
    AllProvidersFailedError,
    EngineAttributes,
    NoProvidersAvailableError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationRateLimitError,
    TranslationValidationError,
)
from core.trans.manager import TransManager

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.metrics_models import TranslationStats
    from models.translation_models import TranslationOutcome


class DummyEngine(TransInterface):
    """Scriptable provider.

    Each call consumes the next entry of ``outcomes`` (the last one repeats). An entry is either
    a translation or an exception to raise. Without outcomes the text comes back as ``"{tgt}:{text}"``.
    """

    def __init__(
        self,
        name: str,
        outcomes: Iterable[str | Exception] = (),
        *,
        priority: int = 0,
        timeout: float = 1.0,
        delay: float = 0.0,
        available: bool = True,
        supports_batch: bool = False,
        batch_size: int = 1,
        languages: Iterable[str] = ("en", "es"),
        failing: Iterable[str] = (),
    ) -> None:
        super().__init__()
        self.engine_attributes = EngineAttributes(
            name=name, priority=priority, timeout=timeout, supports_batch=supports_batch, batch_size=batch_size
        )
        self.outcomes: list[str | Exception] = list(outcomes)
        self.delay: float = delay
        self.available: bool = available
        self.languages: set[str] = set(languages)
        self.failing: set[str] = set(failing)
        self.batch_error: Exception | None = None
        self.batch_results: list[str] | None = None
        self.calls: list[str] = []
        self.batch_calls: list[list[str]] = []
        self.closed: bool = False

    @property
    def is_available(self) -> bool:
        return self.available

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    def initialize(self, config: Config) -> None:
        _ = config

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> Result:
        _ = src_lang
        self.calls.append(content)
        if self.delay:
            await asyncio.sleep(self.delay)
        if content in self.failing:
            msg: str = f"cannot translate '{content}'"
            raise TranslateExceptionError(msg)
        if not self.outcomes:
            return Result(text=f"{tgt_lang}:{content}")

        outcome: str | Exception = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return Result(text=outcome)

    async def translation_batch(self, contents: list[str], tgt_lang: str, src_lang: str) -> list[str]:
        _ = src_lang
        self.batch_calls.append(list(contents))
        if self.batch_error is not None:
            raise self.batch_error
        if self.batch_results is not None:
            return list(self.batch_results)
        return [f"{tgt_lang}:{content}" for content in contents]

    def get_supported_languages(self) -> set[str]:
        return set(self.languages)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
async def cache_manager(config: Config) -> TranslationCacheManager:
    manager = TranslationCacheManager(config, kv_store=MemoryCacheStore())
    await manager.component_load()
    return manager


def _manager(config: Config, *engines: DummyEngine, **kwargs) -> TransManager:
    manager = TransManager(config, **kwargs)
    for engine in engines:
        manager.add_engine(engine)
    return manager


@pytest.mark.asyncio
async def test_initialize_skips_unknown_engines(config: Config, caplog: pytest.LogCaptureFixture) -> None:
    config.TRANSLATION.ENGINE = ["opus_mt", "missing"]
    manager = TransManager(config)

    await manager.initialize()

    assert manager.fetch_engine_names() == ["opus_mt"]
    assert "Translation class not found: 'missing'" in caplog.text
    await manager.shutdown_engines()
    assert manager.fetch_engine_names() == []


@pytest.mark.asyncio
async def test_managers_keep_their_own_engines(config: Config) -> None:
    config.TRANSLATION.ENGINE = ["opus_mt"]
    first = TransManager(config)
    second = TransManager(config)
    await first.initialize()
    second.add_engine(DummyEngine("extra"))

    await second.shutdown_engines()

    assert first.fetch_engine_names() == ["opus_mt"]
    assert second.fetch_engine_names() == []
    await first.shutdown_engines()


def test_select_engines_orders_by_priority_and_skips_unavailable(config: Config) -> None:
    manager = _manager(
        config,
        DummyEngine("low", priority=1),
        DummyEngine("off", priority=9, available=False),
        DummyEngine("high", priority=5),
    )

    assert [engine.engine_name for engine in manager.select_engines()] == ["high", "low"]
    assert manager.fetch_engine_names() == ["low", "off", "high"]


@pytest.mark.asyncio
async def test_best_scoring_candidate_wins_over_priority(config: Config) -> None:
    echo = DummyEngine("echo", ["Hello world"], priority=5)
    good = DummyEngine("good", ["Hola mundo"], priority=1)
    manager = _manager(config, echo, good)

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es", "en")

    assert outcome.text == "Hola mundo"
    assert outcome.provider == "good"
    assert outcome.quality is not None
    assert outcome.quality.score == pytest.approx(0.975)
    assert outcome.from_cache is False
    assert echo.calls == ["Hello world"]


@pytest.mark.asyncio
async def test_score_tie_goes_to_higher_priority(config: Config) -> None:
    manager = _manager(
        config, DummyEngine("low", ["Hola mundo"], priority=1), DummyEngine("high", ["Hola mundo"], priority=5)
    )

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.provider == "high"


@pytest.mark.asyncio
async def test_translate_returns_text_only(config: Config) -> None:
    manager = _manager(config, DummyEngine("one", ["Hola mundo"]))

    assert await manager.translate("Hello world", "es") == "Hola mundo"


@pytest.mark.asyncio
async def test_failed_and_slow_providers_do_not_block_the_race(config: Config) -> None:
    slow = DummyEngine("slow", ["Hola"], timeout=0.01, delay=0.5)
    broken = DummyEngine("broken", [TranslateExceptionError("backend down")])
    good = DummyEngine("good", ["Hola mundo"])
    manager = _manager(config, slow, broken, good)

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.provider == "good"
    assert [entry.error for entry in manager.metrics.get_by_provider("slow")] == ["Provider slow timeout"]
    assert [entry.error for entry in manager.metrics.get_by_provider("broken")] == ["backend down"]


@pytest.mark.asyncio
async def test_race_duration_is_bounded_by_largest_timeout(config: Config) -> None:
    slow_engines = [DummyEngine(f"slow{index}", ["Hola"], timeout=0.2, delay=5.0) for index in range(4)]
    manager = _manager(config, *slow_engines, DummyEngine("good", ["Hola mundo"]))

    started: float = time.perf_counter()
    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")
    elapsed: float = time.perf_counter() - started

    assert outcome.provider == "good"
    # Run one after another, the timeouts would add up to 0.8 s
    assert elapsed < 0.6
    assert all(len(engine.calls) == 1 for engine in slow_engines)


@pytest.mark.asyncio
async def test_empty_translation_is_a_failure(config: Config) -> None:
    manager = _manager(config, DummyEngine("blank", ["   "]), DummyEngine("good", ["Hola mundo"]))

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.provider == "good"
    failure = manager.metrics.get_by_provider("blank")[0]
    assert failure.success is False
    assert failure.error == "'blank' returned an empty translation"


@pytest.mark.asyncio
async def test_unexpected_provider_error_is_logged(config: Config, caplog: pytest.LogCaptureFixture) -> None:
    manager = _manager(config, DummyEngine("buggy", [RuntimeError("bug")]), DummyEngine("good", ["Hola mundo"]))

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.provider == "good"
    assert "Unexpected error from provider 'buggy'" in caplog.text


@pytest.mark.asyncio
async def test_sequential_fallback_after_race_failure(config: Config) -> None:
    flaky = DummyEngine("flaky", [TranslateExceptionError("first try"), "Hola mundo"], priority=2)
    dead = DummyEngine("dead", [TranslateExceptionError("always")], priority=1)
    manager = _manager(config, flaky, dead)

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.provider == "flaky"
    assert len(flaky.calls) == 2
    assert len(dead.calls) == 1


@pytest.mark.asyncio
async def test_all_providers_failed_collects_every_error(config: Config) -> None:
    manager = _manager(
        config,
        DummyEngine("a", [TranslateExceptionError("a down")], priority=2),
        DummyEngine("b", [TranslateExceptionError("b down")], priority=1),
    )

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await manager.translate_detailed("Hello world", "es")

    assert [name for name, _ in exc_info.value.errors] == ["a", "b", "a", "b"]
    assert "a: a down" in str(exc_info.value)


@pytest.mark.asyncio
async def test_no_providers_available(config: Config) -> None:
    manager = _manager(config, DummyEngine("off", available=False))

    with pytest.raises(NoProvidersAvailableError, match="No translation providers available"):
        await manager.translate("Hello", "es")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("text", "tgt_lang", "src_lang"),
    [
        ("", "es", None),
        ("   ", "es", None),
        ("Hello", "", None),
        ("Hello", "zz", None),
        ("Hello", "es", "e1"),
        ("<script>alert(1)</script>", "es", None),
    ],
)
async def test_invalid_requests_are_rejected(config: Config, text: str, tgt_lang: str, src_lang: str | None) -> None:
    engine = DummyEngine("one")
    manager = _manager(config, engine)

    with pytest.raises(TranslationValidationError):
        await manager.translate(text, tgt_lang, src_lang)
    assert engine.calls == []


def test_build_request_normalises_and_defaults(config: Config) -> None:
    config.TRANSLATION.DEFAULT_SOURCE_LANGUAGE = "de"
    manager = _manager(config)

    request = manager.build_request("  Hallo  ", "ES")

    assert (request.text, request.src_lang, request.tgt_lang) == ("Hallo", "de", "es")


@pytest.mark.asyncio
async def test_low_quality_result_is_returned_with_warning(
    config: Config, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING)
    manager = _manager(config, DummyEngine("echo", ["Hello there"], languages=("en", "ja")))

    outcome: TranslationOutcome = await manager.translate_detailed("Hello there", "ja")

    assert outcome.text == "Hello there"
    assert outcome.quality is not None
    assert outcome.quality.passes is False
    assert "Translation quality is low (0.44), but returning result from echo" in caplog.text


@pytest.mark.asyncio
async def test_rate_limited_provider_cools_down(config: Config) -> None:
    limited = DummyEngine("limited", [TranslationRateLimitError("slow down")], priority=5)
    good = DummyEngine("good", ["Hola mundo"])
    manager = _manager(config, limited, good)

    await manager.translate("Hello world", "es")

    assert [engine.engine_name for engine in manager.select_engines()] == ["good"]
    await manager.translate("Good morning", "es")
    assert limited.calls == ["Hello world"]


@pytest.mark.asyncio
async def test_cache_hit_skips_providers(config: Config, cache_manager: TranslationCacheManager) -> None:
    engine = DummyEngine("one", ["Hola mundo"])
    manager = _manager(config, engine, cache_manager=cache_manager)

    first: TranslationOutcome = await manager.translate_detailed("Hello world", "es")
    second: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert first.from_cache is False
    assert second.from_cache is True
    assert second.text == "Hola mundo"
    assert second.provider == "one"
    assert engine.calls == ["Hello world"]
    stats: TranslationStats = manager.metrics.get_stats()
    assert (stats.cache_hits, stats.cache_misses, stats.total_translations) == (1, 1, 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["[]", "5", '{"text": 5, "timestamp": 1, "version": "1.0.0"}'])
async def test_unreadable_cache_entry_is_translated_again(config: Config, raw: str) -> None:
    store = MemoryCacheStore()
    cache_manager = TranslationCacheManager(config, kv_store=store)
    await cache_manager.component_load()
    key: str = cache_manager.build_cache_key("Hello world", "en", "es")
    await store.set(key, raw, 60)
    engine = DummyEngine("one", ["Hola mundo"])
    manager = _manager(config, engine, cache_manager=cache_manager)

    outcome: TranslationOutcome = await manager.translate_detailed("Hello world", "es")

    assert outcome.text == "Hola mundo"
    assert outcome.from_cache is False
    assert engine.calls == ["Hello world"]
    assert await cache_manager.get("Hello world", "en", "es") == "Hola mundo"


@pytest.mark.asyncio
async def test_disabled_cache_records_no_lookups(config: Config) -> None:
    config.CACHE.ENABLED = False
    cache_manager = TranslationCacheManager(config, kv_store=MemoryCacheStore())
    await cache_manager.component_load()
    manager = _manager(config, DummyEngine("one", ["Hola mundo"]), cache_manager=cache_manager)

    await manager.translate("Hello world", "es")
    await manager.translate("Hello world", "es")

    stats: TranslationStats = manager.metrics.get_stats()
    assert (stats.cache_hits, stats.cache_misses, stats.total_translations) == (0, 0, 2)
    assert manager.metrics.get_by_provider("cache") == []
    assert manager.metrics.check_performance_degradation().is_degrading is False


@pytest.mark.asyncio
async def test_concurrent_identical_requests_are_coalesced(config: Config) -> None:
    inflight = InFlightManager()
    await inflight.component_load()
    engine = DummyEngine("one", ["Hola mundo"], delay=0.05)
    manager = _manager(config, engine, inflight_manager=inflight)

    results: list[str] = await asyncio.gather(
        manager.translate("Hello world", "es"), manager.translate("Hello world", "es")
    )

    assert results == ["Hola mundo", "Hola mundo"]
    assert engine.calls == ["Hello world"]
    assert inflight.pending_count == 0


@pytest.mark.asyncio
async def test_coalesced_failure_reaches_every_caller(config: Config) -> None:
    inflight = InFlightManager()
    await inflight.component_load()
    engine = DummyEngine("one", [TranslateExceptionError("down")], delay=0.05)
    manager = _manager(config, engine, inflight_manager=inflight)

    results = await asyncio.gather(
        manager.translate("Hello world", "es"), manager.translate("Hello world", "es"), return_exceptions=True
    )

    assert all(isinstance(result, AllProvidersFailedError) for result in results)
    # One race attempt and one sequential attempt, made by the producer only
    assert len(engine.calls) == 2


@pytest.mark.asyncio
async def test_coalescing_can_be_disabled(config: Config) -> None:
    config.TRANSLATION.COALESCE_INFLIGHT = False
    inflight = InFlightManager()
    await inflight.component_load()
    engine = DummyEngine("one", ["Hola mundo"], delay=0.05)
    manager = _manager(config, engine, inflight_manager=inflight)

    await asyncio.gather(manager.translate("Hello world", "es"), manager.translate("Hello world", "es"))

    assert len(engine.calls) == 2


@pytest.mark.asyncio
async def test_translate_batch_uses_native_batch_provider(
    config: Config, cache_manager: TranslationCacheManager
) -> None:
    engine = DummyEngine("batch", supports_batch=True, batch_size=2)
    manager = _manager(config, engine, cache_manager=cache_manager)

    translations: list[str] = await manager.translate_batch(["Hello", " ", "Bye"], "es")

    assert translations == ["es:Hello", "", "es:Bye"]
    assert engine.batch_calls == [["Hello", "Bye"]]
    assert engine.calls == []
    assert await cache_manager.get("Bye", "en", "es") == "es:Bye"


@pytest.mark.asyncio
async def test_translate_batch_sends_only_uncached_texts(
    config: Config, cache_manager: TranslationCacheManager
) -> None:
    await cache_manager.set("Hello", "en", "es", "Hola")
    engine = DummyEngine("batch", supports_batch=True, batch_size=10)
    manager = _manager(config, engine, cache_manager=cache_manager)

    translations: list[str] = await manager.translate_batch(["Hello", "Bye", "Bye"], "es")

    assert translations == ["Hola", "es:Bye", "es:Bye"]
    assert engine.batch_calls == [["Bye"]]


@pytest.mark.asyncio
async def test_blank_native_batch_items_are_translated_per_item(
    config: Config, cache_manager: TranslationCacheManager, caplog: pytest.LogCaptureFixture
) -> None:
    engine = DummyEngine("batch", supports_batch=True, batch_size=10)
    engine.batch_results = ["Hola", "  "]
    manager = _manager(config, engine, cache_manager=cache_manager)

    translations: list[str] = await manager.translate_batch(["Hello", "Bye"], "es")

    assert translations == ["Hola", "es:Bye"]
    assert engine.calls == ["Bye"]
    assert await cache_manager.get("Hello", "en", "es") == "Hola"
    assert await cache_manager.get("Bye", "en", "es") == "es:Bye"
    assert "'batch' returned 1 empty translations in a batch" in caplog.text


@pytest.mark.asyncio
async def test_failed_native_batch_falls_back_to_single_requests(config: Config) -> None:
    engine = DummyEngine("batch", supports_batch=True, batch_size=10)
    engine.batch_error = TranslateExceptionError("batch endpoint down")
    manager = _manager(config, engine)

    translations: list[str] = await manager.translate_batch(["Hello", "Bye"], "es")

    assert translations == ["es:Hello", "es:Bye"]
    assert sorted(engine.calls) == ["Bye", "Hello"]


@pytest.mark.asyncio
async def test_translate_batch_groups_single_requests(config: Config) -> None:
    config.TRANSLATION.BATCH_CONCURRENCY = 2
    engine = DummyEngine("single")
    manager = _manager(config, engine)

    translations: list[str] = await manager.translate_batch(["one", "two", "three"], "es")

    assert translations == ["es:one", "es:two", "es:three"]
    assert len(engine.calls) == 3


@pytest.mark.asyncio
async def test_translate_batch_edge_cases(config: Config) -> None:
    engine = DummyEngine("single")
    manager = _manager(config, engine)

    assert await manager.translate_batch([], "es") == []
    assert await manager.translate_batch(["", "  "], "es") == ["", ""]
    assert engine.calls == []
    with pytest.raises(TranslationValidationError):
        await manager.translate_batch(["Hello"], "zz")


def test_flatten_and_unflatten_bundle() -> None:
    bundle = {"a": {"b": "x", "c": {"d": 1}}, "e": "y"}

    flat = TransManager.flatten_bundle(bundle)

    assert flat == {"a.b": "x", "a.c.d": 1, "e": "y"}
    assert TransManager.unflatten_bundle(flat) == bundle


@pytest.mark.asyncio
async def test_translate_bundle_uses_cache_and_keeps_other_leaves(
    config: Config, cache_manager: TranslationCacheManager
) -> None:
    await cache_manager.set("Hello", "en", "es", "Hola")
    engine = DummyEngine("single")
    manager = _manager(config, engine, cache_manager=cache_manager)
    bundle = {"title": "Hello", "menu": {"open": "Open", "count": 3, "blank": "  "}, "footer": "Bye"}

    translated = await manager.translate_bundle(bundle, "es")

    assert translated == {
        "title": "Hola",
        "menu": {"open": "es:Open", "count": 3, "blank": "  "},
        "footer": "es:Bye",
    }
    assert sorted(engine.calls) == ["Bye", "Open"]


@pytest.mark.asyncio
async def test_translate_bundle_failed_chunk_keeps_source(config: Config) -> None:
    config.TRANSLATION.BUNDLE_CHUNK_SIZE = 1
    manager = _manager(config, DummyEngine("single", failing=["Close"]))

    translated = await manager.translate_bundle({"buttons": {"open": "Open", "close": "Close"}}, "es")

    assert translated == {"buttons": {"open": "es:Open", "close": "Close"}}


@pytest.mark.asyncio
async def test_translate_bundle_same_language_is_unchanged(config: Config) -> None:
    engine = DummyEngine("single")
    manager = _manager(config, engine)
    bundle = {"a": {"b": "Hello"}}

    assert await manager.translate_bundle(bundle, "en", "en") == bundle
    assert engine.calls == []


def test_supported_languages_union_of_available_providers(config: Config) -> None:
    manager = _manager(
        config,
        DummyEngine("a", languages=("en", "es")),
        DummyEngine("b", languages=("en", "ja")),
        DummyEngine("c", languages=("fr",), available=False),
    )

    assert manager.get_supported_languages() == {"en", "es", "ja"}


@pytest.mark.asyncio
async def test_shutdown_closes_every_engine(config: Config) -> None:
    engines = [DummyEngine("a"), DummyEngine("b", available=False)]
    manager = _manager(config, *engines)

    await manager.shutdown_engines()

    assert all(engine.closed for engine in engines)
    assert manager.fetch_engine_names() == []
    assert manager.select_engines() == []
