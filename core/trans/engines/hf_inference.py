"""Shared base for providers served by a hosted inference API.

The inference API exposes every model at ``{base_url}/models/{model_id}``. Requests carry a bearer token
when ``HUGGINGFACE_API_KEY`` is set; without it the free tier is used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

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
    from models.config_models import ProviderSettings

__all__: list[str] = ["HFInferenceTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class HFInferenceTranslation(TransInterface):
    """Base class for inference-API providers.

    Subclasses name themselves through ``fetch_engine_name`` and may override ``build_payload``.

    Attributes:
        DISPLAY_NAME (ClassVar[str]): Human readable provider name used in error messages.
    """

    DISPLAY_NAME: ClassVar[str] = "Inference API"

    def __init__(self, registry: ModelRegistry | None = None) -> None:
        super().__init__()
        self.registry: ModelRegistry = registry or ModelRegistry.default()
        self.base_url: str = ""
        self._http: AsyncHttp | None = None

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    @classmethod
    def authentication_env_name(cls) -> str:
        return "HUGGINGFACE_API_KEY"

    @property
    def is_available(self) -> bool:
        return bool(self.base_url)

    @property
    def http(self) -> AsyncHttp:
        if self._http is None:
            msg: str = f"'{self.engine_name}' has not been initialised"
            raise TranslateExceptionError(msg)
        return self._http

    def initialize(self, config: Config) -> None:
        settings: ProviderSettings = getattr(config, self.fetch_engine_name().upper())
        self.engine_attributes = EngineAttributes(
            name=self.fetch_engine_name(),
            priority=settings.PRIORITY,
            timeout=settings.TIMEOUT,
        )
        self.base_url = settings.URL.rstrip("/")
        self._http = AsyncHttp()
        logger.debug("'%s' initialised with base URL '%s'", self.engine_name, self.base_url)

    def get_supported_languages(self) -> set[str]:
        return self.registry.supported_languages(self.fetch_engine_name())

    def resolve(self, src_lang: str, tgt_lang: str) -> BackendDescriptor:
        descriptor: BackendDescriptor | None = self.registry.resolve(self.fetch_engine_name(), src_lang, tgt_lang)
        if descriptor is None:
            msg: str = f"{self.DISPLAY_NAME} does not support {src_lang} -> {tgt_lang}"
            raise NotSupportedLanguagesError(msg)
        return descriptor

    def build_payload(self, content: str, descriptor: BackendDescriptor) -> dict[str, Any]:
        return {
            "inputs": content,
            "parameters": {"src_lang": descriptor.src_code, "tgt_lang": descriptor.tgt_code},
        }

    def build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key := self.get_authentication_key():
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    @classmethod
    def extract_text(cls, data: Any) -> str:
        """Normalise an inference response to the translated text.

        Accepted shapes: ``[{"translation_text": ...}]``, ``{"generated_text": ...}`` or a bare string.

        Raises:
            MalformedResponseError: If the response has no non-empty translation.
        """
        text: Any = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("translation_text")
        elif isinstance(data, dict):
            text = data.get("generated_text")
        elif isinstance(data, str):
            text = data

        if not isinstance(text, str) or not text.strip():
            msg: str = f"{cls.DISPLAY_NAME} returned no translation"
            raise MalformedResponseError(msg)
        return text

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> Result:
        descriptor: BackendDescriptor = self.resolve(src_lang, tgt_lang)
        url: str = f"{self.base_url}/models/{descriptor.model_id}"
        try:
            data: Any = await self.http.post(
                url=url,
                data=self.build_payload(content, descriptor),
                headers=self.build_headers(),
                total_timeout=self.timeout,
            )
        except AsyncCommError as err:
            raise map_comm_error(self.DISPLAY_NAME, err) from err

        text: str = self.extract_text(data)
        logger.info("translation completed (%s > %s) by '%s'", src_lang, tgt_lang, descriptor.model_id)
        return Result(text=text, metadata={"engine": self.engine_name, "model": descriptor.model_id})

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None
        logger.debug("'%s' process termination", self.__class__.__name__)
