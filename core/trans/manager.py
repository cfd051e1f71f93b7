"""Hybrid translation orchestrator.

``TransManager`` races every available provider for a request, scores the successful candidates and
returns the best one. Results are cached, concurrent misses for the same text are coalesced, and every
attempt is recorded in the metrics collector.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.language.validator import LanguageValidator
from core.metrics.collector import CACHE_PROVIDER, MetricsCollector
from core.quality.scorer import QualityScorer
from core.trans.engines import (
    DeeplTranslation,  # noqa: F401
    LibreTranslateTranslation,  # noqa: F401
    M2M100Translation,  # noqa: F401
    NLLBTranslation,  # noqa: F401
    OpusMTTranslation,  # noqa: F401
)
from core.trans.interface import (
    AllProvidersFailedError,
    MalformedResponseError,
    NoProvidersAvailableError,
    ProviderTimeoutError,
    TransInterface,
    TranslateExceptionError,
    TranslationValidationError,
)
from models.translation_models import ProviderResult, TranslationOutcome, TranslationRequest
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping, Sequence

    from config.loader import Config
    from core.cache.inflight_manager import InFlightManager
    from core.cache.manager import TranslationCacheManager
    from models.cache_models import CacheEntry
    from models.language_models import LanguageValidation
    from models.quality_models import ScoredCandidate


__all__: list[str] = ["TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ADAPTIVE_LIMITER_ENABLED: bool = True
ADAPTIVE_LIMITER_BASE_COOLDOWN_SEC: float = 1.0
ADAPTIVE_LIMITER_MAX_COOLDOWN_SEC: float = 30.0
ADAPTIVE_LIMITER_RESET_SEC: float = 60.0
ADAPTIVE_LIMITER_LOG_INTERVAL_SEC: float = 5.0

BUNDLE_KEY_SEPARATOR: str = "."


@dataclass
class _RateLimitState:
    error_count: int = 0
    last_error: float = 0.0
    until: float = 0.0
    last_log: float = 0.0


class TransManager:
    """Orchestrator for the translation providers."""

    def __init__(
        self,
        config: Config,
        cache_manager: TranslationCacheManager | None = None,
        inflight_manager: InFlightManager | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """Initialize the TransManager with the given configuration.

        Args:
            config (Config): The configuration object containing provider settings.
            cache_manager (TranslationCacheManager | None): Translation cache; caching is skipped when None.
            inflight_manager (InFlightManager | None): Coalesces concurrent misses for the same request.
            metrics (MetricsCollector | None): Metrics sink; a private collector is created when None.
        """
        self.config: Config = config
        self.cache_manager: TranslationCacheManager | None = cache_manager
        self.inflight_manager: InFlightManager | None = inflight_manager
        self.metrics: MetricsCollector = metrics if metrics is not None else MetricsCollector(config.METRICS)
        self._trans_engine: list[str] = []
        self._trans_instance: dict[str, TransInterface] = {}
        self._rate_limits: dict[str, _RateLimitState] = {}
        logger.debug("Registered translation engines: %s", TransInterface.registered)

    async def initialize(self) -> None:
        """Instantiate and initialise the providers listed in ``TRANSLATION.ENGINE``."""
        logger.info("TransManager initialization started")

        self._trans_engine.clear()
        for _name in self.config.TRANSLATION.ENGINE:
            _cls: type[TransInterface] | None = TransInterface.registered.get(_name)
            if _cls is None:
                logger.critical("Translation class not found: '%s'", _name)
                continue
            _instance: TransInterface = _cls()
            try:
                _instance.initialize(self.config)
            except RuntimeError as err:
                logger.critical("RuntimeError in '%s' translation setup: %s", _name, err)
            except TranslateExceptionError as err:
                logger.critical("Exception in '%s' translation setup: %s", _name, err)
            else:
                self._trans_instance[_name] = _instance
                self._trans_engine.append(_name)
                logger.info("Translation engine initialized: '%s'", _name)
                logger.debug("Engine attributes: %s", _instance.engine_attributes)

    def fetch_engine_names(self) -> list[str]:
        """Names of the providers registered with this manager, in registration order."""
        return list(self._trans_engine)

    def add_engine(self, engine: TransInterface) -> None:
        """Register an already initialised provider instance."""
        self._trans_instance[engine.engine_name] = engine
        if engine.engine_name not in self._trans_engine:
            self._trans_engine.append(engine.engine_name)

    def select_engines(self) -> list[TransInterface]:
        """Available, non-throttled providers, highest priority first.

        Providers with equal priority keep their configuration order.
        """
        candidates: list[TransInterface] = [
            engine
            for name, engine in self._trans_instance.items()
            if engine.is_available and not self._rate_limit_blocked(name)
        ]
        return sorted(candidates, key=lambda engine: engine.priority, reverse=True)

    def _rate_limit_blocked(self, name: str) -> bool:
        """Check if a provider is cooling down after a rate-limit error."""
        if not ADAPTIVE_LIMITER_ENABLED:
            return False

        state: _RateLimitState | None = self._rate_limits.get(name)
        if state is None:
            return False

        now: float = time.monotonic()
        if now < state.until:
            if now - state.last_log >= ADAPTIVE_LIMITER_LOG_INTERVAL_SEC:
                logger.warning("'%s' temporarily throttled (%.1f sec remaining).", name, state.until - now)
                state.last_log = now
            return True
        return False

    def _register_rate_limit(self, name: str) -> None:
        """Register a rate-limit event and extend the provider's cooldown exponentially."""
        if not ADAPTIVE_LIMITER_ENABLED:
            return

        state: _RateLimitState = self._rate_limits.setdefault(name, _RateLimitState())
        now: float = time.monotonic()
        if now - state.last_error > ADAPTIVE_LIMITER_RESET_SEC:
            state.error_count = 0

        state.error_count += 1
        state.last_error = now

        backoff: float = ADAPTIVE_LIMITER_BASE_COOLDOWN_SEC * (2 ** (state.error_count - 1))
        backoff = min(backoff, ADAPTIVE_LIMITER_MAX_COOLDOWN_SEC)
        state.until = max(state.until, now + backoff)

    @staticmethod
    def _normalize_language(code: str, *, role: str) -> str:
        validation: LanguageValidation = LanguageValidator.validate(code)
        if not validation.valid or validation.normalized_code is None:
            msg: str = f"Invalid {role} language: {validation.error}"
            raise TranslationValidationError(msg)
        return validation.normalized_code

    def build_request(self, text: str, tgt_lang: str, src_lang: str | None = None) -> TranslationRequest:
        """Validate and sanitise a translation request.

        Raises:
            TranslationValidationError: If the text is blank (before or after sanitisation) or a language code
                is missing or invalid.
        """
        if not isinstance(text, str) or not text.strip():
            msg = "Invalid text input"
            raise TranslationValidationError(msg)
        if not isinstance(tgt_lang, str) or not tgt_lang.strip():
            msg = "Invalid target language"
            raise TranslationValidationError(msg)

        sanitized: str = StringUtils.sanitize_text(text)
        if not sanitized:
            msg = "Text is empty after sanitisation"
            raise TranslationValidationError(msg)

        return TranslationRequest(
            text=sanitized,
            tgt_lang=self._normalize_language(tgt_lang, role="target"),
            src_lang=self._normalize_language(
                src_lang or self.config.TRANSLATION.DEFAULT_SOURCE_LANGUAGE, role="source"
            ),
        )

    async def translate(self, text: str, tgt_lang: str, src_lang: str | None = None) -> str:
        """Translate ``text`` and return only the selected translation."""
        outcome: TranslationOutcome = await self.translate_detailed(text, tgt_lang, src_lang)
        return outcome.text

    async def translate_detailed(self, text: str, tgt_lang: str, src_lang: str | None = None) -> TranslationOutcome:
        """Translate ``text``, returning the selected candidate with its provider and quality score.

        Raises:
            TranslationValidationError: If the request is malformed.
            NoProvidersAvailableError: If no provider is available.
            AllProvidersFailedError: If every provider failed, in parallel and sequentially.
        """
        request: TranslationRequest = self.build_request(text, tgt_lang, src_lang)
        logger.debug("Translation started (%s > %s): '%s'", request.src_lang, request.tgt_lang, request.text[:50])

        cached: TranslationOutcome | None = await self._fetch_cached(request)
        if cached is not None:
            return cached

        if self.inflight_manager is None or not self.config.TRANSLATION.COALESCE_INFLIGHT:
            return await self._translate_uncached(request)

        inflight_key: str = StringUtils.generate_translation_key(request.text, request.src_lang, request.tgt_lang)
        try:
            shared: TranslationOutcome | None = await self.inflight_manager.mark_inflight_start(inflight_key)
        except TimeoutError as err:
            logger.warning("Coalesced translation unavailable, translating independently: %s", err)
            return await self._translate_uncached(request)

        if shared is not None:
            logger.debug("Reusing in-flight translation result from '%s'", shared.provider)
            return shared

        try:
            outcome: TranslationOutcome = await self._translate_uncached(request)
        except asyncio.CancelledError:
            self.inflight_manager.abandon(inflight_key)
            raise
        except Exception as err:
            await self.inflight_manager.store_inflight_exception(inflight_key, err)
            raise

        await self.inflight_manager.store_inflight_result(inflight_key, outcome)
        return outcome

    async def _fetch_cached(self, request: TranslationRequest) -> TranslationOutcome | None:
        if self.cache_manager is None or not self.cache_manager.enabled:
            return None

        start: float = self.metrics.track_start()
        entry: CacheEntry | None = await self.cache_manager.get_entry(request.text, request.src_lang, request.tgt_lang)
        self.metrics.track_complete(
            start,
            CACHE_PROVIDER,
            request.src_lang,
            request.tgt_lang,
            success=entry is not None,
            quality_score=entry.quality_score if entry is not None else None,
            from_cache=entry is not None,
            text_length=len(request.text),
        )
        if entry is None:
            return None

        logger.debug("Translation cache hit: '%s'", entry.text[:50])
        return TranslationOutcome(text=entry.text, provider=entry.provider or CACHE_PROVIDER, from_cache=True)

    async def _translate_uncached(self, request: TranslationRequest) -> TranslationOutcome:
        engines: list[TransInterface] = self.select_engines()
        if not engines:
            msg = "No translation providers available"
            raise NoProvidersAvailableError(msg)

        results: list[ProviderResult] = await self._race(engines, request)
        successes: list[ProviderResult] = [result for result in results if result.succeeded]
        errors: list[tuple[str, Exception]] = [
            (result.provider, result.error) for result in results if result.error is not None
        ]

        if not successes:
            logger.warning("All %d providers failed in parallel; retrying sequentially", len(engines))
            fallback: ProviderResult | None = await self._sequential_fallback(engines, request, errors)
            if fallback is None:
                raise AllProvidersFailedError(errors)
            successes = [fallback]

        outcome: TranslationOutcome = self._select_candidate(successes, request)

        if self.cache_manager is not None:
            await self.cache_manager.set(
                request.text,
                request.src_lang,
                request.tgt_lang,
                outcome.text,
                provider=outcome.provider,
                quality_score=outcome.quality.score if outcome.quality is not None else None,
            )
        return outcome

    async def _race(self, engines: Sequence[TransInterface], request: TranslationRequest) -> list[ProviderResult]:
        """Run every provider concurrently; results keep the order of ``engines``."""
        logger.debug("Racing providers: %s", [engine.engine_name for engine in engines])
        return list(await asyncio.gather(*(self._attempt(engine, request) for engine in engines)))

    async def _sequential_fallback(
        self,
        engines: Sequence[TransInterface],
        request: TranslationRequest,
        errors: list[tuple[str, Exception]],
    ) -> ProviderResult | None:
        """Try the providers one at a time; failures are appended to ``errors``."""
        for engine in engines:
            result: ProviderResult = await self._attempt(engine, request)
            if result.succeeded:
                return result
            if result.error is not None:
                errors.append((result.provider, result.error))
        return None

    async def _attempt(self, engine: TransInterface, request: TranslationRequest) -> ProviderResult:
        """Call one provider under its own timeout. Never raises except on cancellation."""
        name: str = engine.engine_name
        start: float = self.metrics.track_start()
        error: Exception
        try:
            result = await asyncio.wait_for(
                engine.translation(request.text, request.tgt_lang, request.src_lang),
                timeout=engine.timeout,
            )
            text: str = StringUtils.ensure_str(result.text)
            if not text.strip():
                msg: str = f"'{name}' returned an empty translation"
                raise MalformedResponseError(msg)
        except TimeoutError:
            error = ProviderTimeoutError(f"Provider {name} timeout")
        except TranslateExceptionError as err:
            error = err
            if engine.is_rate_limit_error(err):
                self._register_rate_limit(name)
        except Exception as err:  # noqa: BLE001
            logger.exception("Unexpected error from provider '%s'", name)
            error = err
        else:
            quality: float = QualityScorer.evaluate(
                request.text, text, request.src_lang, request.tgt_lang, self.config.TRANSLATION.QUALITY_THRESHOLD
            ).score
            entry = self.metrics.track_complete(
                start,
                name,
                request.src_lang,
                request.tgt_lang,
                success=True,
                quality_score=quality,
                text_length=len(request.text),
            )
            return ProviderResult(provider=name, text=text, elapsed_ms=entry.response_time_ms)

        logger.warning("Provider '%s' failed: %s", name, error or type(error).__name__)
        entry = self.metrics.track_complete(
            start,
            name,
            request.src_lang,
            request.tgt_lang,
            success=False,
            error=str(error) or type(error).__name__,
            text_length=len(request.text),
        )
        return ProviderResult(provider=name, error=error, elapsed_ms=entry.response_time_ms)

    def _select_candidate(self, successes: list[ProviderResult], request: TranslationRequest) -> TranslationOutcome:
        threshold: float = self.config.TRANSLATION.QUALITY_THRESHOLD
        best: ScoredCandidate | None = QualityScorer.select_best_translation(
            ((StringUtils.ensure_str(result.text), result.provider) for result in successes),
            request.text,
            request.src_lang,
            request.tgt_lang,
            threshold,
        )
        if best is None:
            msg = "No candidate to select from"
            raise AllProvidersFailedError([("", MalformedResponseError(msg))])

        if not best.score.passes:
            logger.warning(
                "Translation quality is low (%.2f), but returning result from %s. Issues: %s",
                best.score.score,
                best.provider,
                ", ".join(best.score.issues) or "-",
            )
        logger.debug("Selected '%s' with quality %.2f", best.provider, best.score.score)
        return TranslationOutcome(text=best.text, provider=best.provider, quality=best.score)

    async def translate_batch(self, texts: Sequence[str], tgt_lang: str, src_lang: str | None = None) -> list[str]:
        """Translate several texts, preserving order.

        Cached texts are served from the cache. A native-batch provider, when available, receives the rest
        in one call; whatever it cannot translate (the whole list when the call fails) is translated in
        groups of ``TRANSLATION.BATCH_CONCURRENCY`` concurrent calls. Blank texts come back as empty strings.
        """
        if not texts:
            return []

        tgt: str = self._normalize_language(tgt_lang, role="target")
        src: str = self._normalize_language(src_lang or self.config.TRANSLATION.DEFAULT_SOURCE_LANGUAGE, role="source")
        sanitized: list[str] = [StringUtils.sanitize_text(StringUtils.ensure_str(text)) for text in texts]
        indexes: list[int] = [index for index, text in enumerate(sanitized) if text]
        translations: list[str] = [""] * len(sanitized)
        if not indexes:
            return translations

        pending: list[str] = [sanitized[index] for index in indexes]
        resolved: dict[str, str] = {}
        if self.cache_manager is not None:
            resolved = await self.cache_manager.get_batch(pending, src, tgt)

        uncached: list[str] = [text for text in dict.fromkeys(pending) if text not in resolved]
        if uncached:
            resolved.update(await self._translate_native_batch(uncached, tgt, src) or {})
            missing: list[str] = [text for text in uncached if text not in resolved]
            if missing:
                resolved.update(zip(missing, await self._translate_grouped(missing, tgt, src), strict=True))

        for index in indexes:
            translations[index] = resolved[sanitized[index]]
        return translations

    async def _translate_native_batch(self, texts: list[str], tgt: str, src: str) -> dict[str, str] | None:
        """Translate ``texts`` with the first available native-batch provider.

        Returns:
            dict[str, str] | None: Non-blank translations keyed by source text, or None when no provider
            supports batching or the batch call failed.
        """
        engine: TransInterface | None = next((e for e in self.select_engines() if e.supports_batch), None)
        if engine is None:
            return None

        name: str = engine.engine_name
        requests: int = -(-len(texts) // max(1, engine.batch_size))
        start: float = self.metrics.track_start()
        try:
            translations: list[str] = await asyncio.wait_for(
                engine.translation_batch(texts, tgt, src), timeout=engine.timeout * requests
            )
            if len(translations) != len(texts):
                msg: str = f"'{name}' returned {len(translations)} translations for {len(texts)} texts"
                raise MalformedResponseError(msg)
        except TimeoutError:
            error: Exception = ProviderTimeoutError(f"Provider {name} batch timeout")
        except TranslateExceptionError as err:
            error = err
            if engine.is_rate_limit_error(err):
                self._register_rate_limit(name)
        else:
            self.metrics.track_complete(start, name, src, tgt, success=True, text_length=sum(map(len, texts)))
            usable: dict[str, str] = {
                text: translated
                for text, translated in zip(texts, translations, strict=True)
                if isinstance(translated, str) and translated.strip()
            }
            if len(usable) < len(texts):
                logger.warning(
                    "'%s' returned %d empty translations in a batch; translating them per item",
                    name,
                    len(texts) - len(usable),
                )
            if self.cache_manager is not None:
                await self.cache_manager.set_batch(usable, src, tgt, provider=name)
            logger.info("Batch of %d texts translated natively by '%s'", len(usable), name)
            return usable

        self.metrics.track_complete(
            start, name, src, tgt, success=False, error=str(error), text_length=sum(map(len, texts))
        )
        logger.warning("Native batch translation by '%s' failed, translating per item: %s", name, error)
        return None

    async def _translate_grouped(self, texts: list[str], tgt: str, src: str) -> list[str]:
        group_size: int = max(1, self.config.TRANSLATION.BATCH_CONCURRENCY)
        translations: list[str] = []
        for start in range(0, len(texts), group_size):
            group: list[str] = texts[start : start + group_size]
            translations.extend(await asyncio.gather(*(self.translate(text, tgt, src) for text in group)))
        return translations

    @staticmethod
    def flatten_bundle(bundle: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
        """Flatten nested mappings into dotted keys, e.g. ``{"a": {"b": "x"}}`` -> ``{"a.b": "x"}``."""
        flat: dict[str, Any] = {}
        for key, value in bundle.items():
            path: str = f"{prefix}{BUNDLE_KEY_SEPARATOR}{key}" if prefix else str(key)
            if isinstance(value, dict):
                flat.update(TransManager.flatten_bundle(value, path))
            else:
                flat[path] = value
        return flat

    @staticmethod
    def unflatten_bundle(flat: Mapping[str, Any]) -> dict[str, Any]:
        """Inverse of ``flatten_bundle``."""
        bundle: dict[str, Any] = {}
        for path, value in flat.items():
            node: dict[str, Any] = bundle
            *parents, leaf = path.split(BUNDLE_KEY_SEPARATOR)
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = value
        return bundle

    async def translate_bundle(
        self, bundle: Mapping[str, Any], tgt_lang: str, src_lang: str | None = None
    ) -> dict[str, Any]:
        """Translate every string leaf of a nested bundle of UI strings.

        Cached strings are served from the cache; the rest are translated in chunks of
        ``TRANSLATION.BUNDLE_CHUNK_SIZE``. A chunk that fails keeps its source strings.
        Non-string leaves are returned unchanged.
        """
        flat: dict[str, Any] = self.flatten_bundle(bundle)
        tgt: str = self._normalize_language(tgt_lang, role="target")
        src: str = self._normalize_language(src_lang or self.config.TRANSLATION.DEFAULT_SOURCE_LANGUAGE, role="source")
        if src == tgt:
            return self.unflatten_bundle(flat)

        texts: dict[str, str] = {
            path: StringUtils.sanitize_text(value)
            for path, value in flat.items()
            if isinstance(value, str) and value.strip()
        }
        cached: dict[str, str] = {}
        if self.cache_manager is not None:
            cached = await self.cache_manager.get_batch(texts.values(), src, tgt)

        pending: list[str] = [path for path, text in texts.items() if text and text not in cached]
        translated: dict[str, str] = {}
        chunk_size: int = max(1, self.config.TRANSLATION.BUNDLE_CHUNK_SIZE)
        for start in range(0, len(pending), chunk_size):
            chunk: list[str] = pending[start : start + chunk_size]
            try:
                results: list[str] = await self.translate_batch([texts[path] for path in chunk], tgt, src)
            except (TranslateExceptionError, TranslationValidationError) as err:
                logger.warning("Bundle chunk of %d strings left untranslated: %s", len(chunk), err)
                continue
            translated.update(zip(chunk, results, strict=True))

        logger.info(
            "Bundle translated (%s > %s): %d cached, %d translated, %d untranslated",
            src,
            tgt,
            sum(1 for text in texts.values() if text in cached),
            len(translated),
            len(pending) - len(translated),
        )
        for path, text in texts.items():
            if path in translated:
                flat[path] = translated[path]
            elif text in cached:
                flat[path] = cached[text]
        return self.unflatten_bundle(flat)

    def get_supported_languages(self) -> set[str]:
        """Union of the languages of every available provider."""
        languages: set[str] = set()
        for engine in self._trans_instance.values():
            if engine.is_available:
                languages |= engine.get_supported_languages()
        return languages

    async def shutdown_engines(self) -> None:
        """Shut down all active translation engines."""
        logger.info("Class '%s' termination process started.", self.__class__.__name__)
        for _inst in self._trans_instance.values():
            await _inst.close()
        self._trans_instance.clear()
        self._trans_engine.clear()
        logger.info("Class '%s' termination process completed.", self.__class__.__name__)
