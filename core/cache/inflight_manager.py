from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import TranslationOutcome


__all__: list[str] = ["InFlightManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class InFlightManager:
    """Coalesces concurrent translation requests for the same cache key.

    The first caller for a key becomes the producer and runs the provider race; callers that arrive
    while the race is running wait for the producer's outcome (or exception) instead of starting
    their own race. Outcomes are only delivered by the task that registered the key, to the future it
    registered.

    Attributes:
        INFLIGHT_TIMEOUT_SEC (ClassVar[float]): Default time a waiter waits for the producer.
    """

    INFLIGHT_TIMEOUT_SEC: ClassVar[float] = 30.0

    def __init__(self, timeout_sec: float | None = None) -> None:
        self._inflight: dict[str, asyncio.Future[TranslationOutcome]] = {}
        self._producers: dict[tuple[asyncio.Task[Any] | None, str], asyncio.Future[TranslationOutcome]] = {}
        self._lock: asyncio.Lock = asyncio.Lock()
        self._is_initialized: bool = False
        self.timeout_sec: float = timeout_sec if timeout_sec is not None else self.INFLIGHT_TIMEOUT_SEC

    @property
    def pending_count(self) -> int:
        return len(self._inflight)

    async def component_load(self) -> None:
        self._is_initialized = True
        logger.info("InFlightManager initialized successfully")

    async def component_teardown(self) -> None:
        """Cancel pending futures and clear the in-flight state."""
        self._is_initialized = False
        async with self._lock:
            for fut in self._inflight.values():
                if not fut.done():
                    fut.cancel()
            self._inflight.clear()
            self._producers.clear()
        logger.info("InFlightManager torn down and in-flight state cleared")

    async def mark_inflight_start(self, cache_key: str | None) -> TranslationOutcome | None:
        """Register as producer for a key, or wait for the current producer.

        Args:
            cache_key (str | None): Cache key of the request.

        Returns:
            TranslationOutcome | None: The producer's outcome when another request is already running,
            or None when the caller has just become the producer (or coalescing is inactive).

        Raises:
            TimeoutError: If waiting for the producer times out or the producer abandons the key.
            Exception: Whatever the producer stored with ``store_inflight_exception``.
        """
        if not self._is_initialized:
            return None

        if not cache_key:
            logger.warning("Attempted to mark in-flight start with empty cache key")
            return None

        async with self._lock:
            if cache_key not in self._inflight:
                loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
                fut: asyncio.Future[TranslationOutcome] = loop.create_future()
                self._inflight[cache_key] = fut
                self._producers[(asyncio.current_task(), cache_key)] = fut
                logger.debug("Marked in-flight start for key: %s", cache_key[:48])
                return None
            fut = self._inflight[cache_key]
            logger.debug("In-flight translation detected for key: %s", cache_key[:48])

        try:
            outcome: TranslationOutcome = await asyncio.wait_for(asyncio.shield(fut), timeout=self.timeout_sec)
        except TimeoutError:
            logger.warning("In-flight translation timeout for key: %s", cache_key[:48])
            await self._forget(cache_key, fut)
            msg: str = f"In-flight translation timed out for key: {cache_key[:48]}"
            raise TimeoutError(msg) from None
        except asyncio.CancelledError:
            if not fut.cancelled():
                # The waiter itself is being cancelled.
                raise
            logger.warning("In-flight translation abandoned for key: %s", cache_key[:48])
            msg = f"In-flight translation abandoned for key: {cache_key[:48]}"
            raise TimeoutError(msg) from None
        else:
            logger.debug("Received in-flight translation result for key: %s", cache_key[:48])
            return outcome

    async def _forget(self, cache_key: str, fut: asyncio.Future[TranslationOutcome]) -> None:
        async with self._lock:
            if self._inflight.get(cache_key) is fut:
                self._inflight.pop(cache_key, None)

    def _release(self, cache_key: str) -> asyncio.Future[TranslationOutcome] | None:
        """Detach the future the calling task registered for ``cache_key``.

        A key whose future belongs to a newer producer (registered after a waiter gave up on the
        previous one) is left alone.
        """
        owner: tuple[asyncio.Task[Any] | None, str] = (asyncio.current_task(), cache_key)
        fut: asyncio.Future[TranslationOutcome] | None = self._producers.pop(owner, None)
        if fut is None:
            return None
        if self._inflight.get(cache_key) is fut:
            self._inflight.pop(cache_key, None)
        return fut

    async def store_inflight_result(self, cache_key: str | None, outcome: TranslationOutcome) -> None:
        if not cache_key:
            return

        async with self._lock:
            fut: asyncio.Future[TranslationOutcome] | None = self._release(cache_key)
            if fut and not fut.done():
                fut.set_result(outcome)
                logger.debug("Set in-flight translation result for key: %s", cache_key[:48])

    async def store_inflight_exception(self, cache_key: str | None, exc: Exception) -> None:
        if not cache_key:
            return

        async with self._lock:
            fut: asyncio.Future[TranslationOutcome] | None = self._release(cache_key)
            if fut and not fut.done():
                fut.set_exception(exc)
                # Retrieve once so an unobserved failure is not reported at garbage collection.
                fut.exception()
                logger.debug("Set in-flight translation exception for key: %s", cache_key[:48])

    def abandon(self, cache_key: str | None) -> None:
        """Release a key without an outcome; waiters see TimeoutError.

        Synchronous so that it can run while the producer task is being cancelled.
        """
        if not cache_key:
            return
        fut: asyncio.Future[TranslationOutcome] | None = self._release(cache_key)
        if fut and not fut.done():
            fut.cancel()
            logger.debug("Abandoned in-flight translation for key: %s", cache_key[:48])
