from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.trans.engines.comm_errors import map_comm_error
from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    NotSupportedLanguagesError,
    Result,
    TransInterface,
    TranslateExceptionError,
)
from core.trans.registry import ModelRegistry
from handlers.async_comm import AsyncCommError, AsyncHttp
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config
    from core.trans.registry import BackendDescriptor


__all__: list[str] = ["LibreTranslateTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class LibreTranslateTranslation(TransInterface):
    """Self-hosted LibreTranslate server.

    Available only when ``[LIBRETRANSLATE] URL`` is configured. Supports native batch translation:
    the ``q`` field may be a list, in which case ``translatedText`` is a list in the same order.
    """

    def __init__(self, registry: ModelRegistry | None = None) -> None:
        super().__init__()
        self.registry: ModelRegistry = registry or ModelRegistry.default()
        self.base_url: str = ""
        self._http: AsyncHttp | None = None

    @property
    def is_available(self) -> bool:
        return bool(self.base_url) and self._http is not None

    @staticmethod
    def fetch_engine_name() -> str:
        return "libretranslate"

    def initialize(self, config: Config) -> None:
        """Read the server URL and scheduling settings from the ``LIBRETRANSLATE`` section.

        Args:
            config (Config): The configuration object.
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        settings = config.LIBRETRANSLATE
        self.engine_attributes = EngineAttributes(
            name=self.fetch_engine_name(),
            priority=settings.PRIORITY,
            timeout=settings.TIMEOUT,
            supports_batch=True,
            batch_size=max(1, settings.BATCH_SIZE),
        )
        self.base_url = settings.URL.rstrip("/")
        if not self.base_url:
            logger.warning("LibreTranslate URL not configured; provider disabled")
            return
        self._http = AsyncHttp()

    @property
    def http(self) -> AsyncHttp:
        if self._http is None:
            msg = "LibreTranslate URL not configured"
            raise TranslateExceptionError(msg)
        return self._http

    def get_supported_languages(self) -> set[str]:
        return self.registry.supported_languages(self.fetch_engine_name())

    def _resolve(self, src_lang: str, tgt_lang: str) -> BackendDescriptor:
        descriptor: BackendDescriptor | None = self.registry.resolve(self.fetch_engine_name(), src_lang, tgt_lang)
        if descriptor is None:
            msg: str = f"LibreTranslate does not support {src_lang} -> {tgt_lang}"
            raise NotSupportedLanguagesError(msg)
        return descriptor

    async def _post(self, query: str | list[str], descriptor: BackendDescriptor) -> Any:
        body: dict[str, Any] = {
            "q": query,
            "source": descriptor.src_code,
            "target": descriptor.tgt_code,
            "format": "text",
        }
        if api_key := self.get_authentication_key():
            body["api_key"] = api_key

        try:
            data: Any = await self.http.post(url=f"{self.base_url}/translate", data=body, total_timeout=self.timeout)
        except AsyncCommError as err:
            raise map_comm_error("LibreTranslate", err) from err

        if not isinstance(data, dict):
            msg = "LibreTranslate returned an unexpected response"
            raise MalformedResponseError(msg)
        return data.get("translatedText")

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> Result:
        descriptor: BackendDescriptor = self._resolve(src_lang, tgt_lang)
        text: Any = await self._post(content, descriptor)
        if not isinstance(text, str) or not text.strip():
            msg = "LibreTranslate returned no translation"
            raise MalformedResponseError(msg)

        logger.info("translation completed (%s > %s)", descriptor.src_code, descriptor.tgt_code)
        return Result(text=text, metadata={"engine": self.engine_name})

    async def translation_batch(self, contents: list[str], tgt_lang: str, src_lang: str) -> list[str]:
        """Translate ``contents`` in chunks of ``batch_size`` texts per request.

        Raises:
            MalformedResponseError: If a response does not hold one translation per input text.
        """
        descriptor: BackendDescriptor = self._resolve(src_lang, tgt_lang)
        translations: list[str] = []
        for start in range(0, len(contents), self.batch_size):
            chunk: list[str] = contents[start : start + self.batch_size]
            texts: Any = await self._post(chunk, descriptor)
            if not isinstance(texts, list) or len(texts) != len(chunk) or not all(isinstance(t, str) for t in texts):
                msg = "LibreTranslate batch response does not match the request"
                raise MalformedResponseError(msg)
            translations.extend(texts)

        logger.info("batch translation completed (%s > %s): %d texts", src_lang, tgt_lang, len(translations))
        return translations

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None
        logger.debug("'%s' process termination", self.__class__.__name__)
