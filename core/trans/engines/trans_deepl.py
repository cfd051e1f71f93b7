from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar

from deepl import DeepLClient, Language, TextResult
from deepl.exceptions import (
    AuthorizationException,
    ConnectionException,
    DeepLException,
    QuotaExceededException,
    TooManyRequestsException,
)

from core.trans.interface import (
    EngineAttributes,
    MalformedResponseError,
    NotSupportedLanguagesError,
    ProviderTimeoutError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["DeeplTranslation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class DeeplTranslation(TransInterface):
    """DeepL API provider.

    Available only when ``DEEPL_API_KEY`` is set. The blocking DeepL client runs in a worker thread.
    """

    _source_codes: ClassVar[dict[str, str]] = {}  # Mapping of source language codes to DeepL's format
    _target_codes: ClassVar[dict[str, str]] = {}  # Mapping of target language codes to DeepL's format

    def __init__(self) -> None:
        super().__init__()
        self.__inst: DeepLClient | None = None
        self.__available: bool = False
        self._generate_langcode_mappings()

    def _generate_langcode_mappings(self) -> None:
        """Populate the source/target code maps from the ``deepl.Language`` constants.

        Codes are keyed by their base form (``en-US`` -> ``en``). Target codes keep the regional variant
        that DeepL requires (``EN-US``, ``PT-BR``).
        """
        if DeeplTranslation._source_codes:
            return

        language_constants: dict[str, str] = {
            name: value for name, value in vars(Language).items() if isinstance(value, str) and name.isupper()
        }
        for code in language_constants.values():
            base_code: str = code.split("-")[0].lower()
            DeeplTranslation._source_codes[base_code] = base_code.upper()
            DeeplTranslation._target_codes[base_code] = code.upper()

        logger.debug("Language code mapping generated for DeepL.")

    @property
    def _inst(self) -> DeepLClient:
        if self.__inst is None:
            msg = "The DeepL instance is not initialised"
            raise TranslateExceptionError(msg)
        return self.__inst

    @property
    def is_available(self) -> bool:
        return self.__available

    @staticmethod
    def fetch_engine_name() -> str:
        return "deepl"

    def initialize(self, config: Config) -> None:
        """Create the DeepL client.

        Without an API key the provider stays unavailable and is skipped by the orchestrator.

        Args:
            config (Config): The configuration object (``DEEPL`` section).

        Raises:
            RuntimeError: If an error occurs during the creation of the DeepL client.
        """
        logger.debug("'%s' Initialization start", self.__class__.__name__)
        settings = config.DEEPL
        self.engine_attributes = EngineAttributes(
            name=self.fetch_engine_name(),
            priority=settings.PRIORITY,
            timeout=settings.TIMEOUT,
        )

        auth_key: str = self.get_authentication_key()
        if not auth_key:
            logger.warning("'%s' is not set; DeepL provider disabled", self.authentication_env_name())
            return

        try:
            # Authentication occurs when the API is used, rather than when the instance is created.
            self.__inst = DeepLClient(auth_key)
        except (AttributeError, ValueError) as err:
            logger.critical(err)
            msg = "An error occurred while creating the DeepL client instance"
            raise RuntimeError(msg) from err
        self.__available = True

    def get_supported_languages(self) -> set[str]:
        return set(DeeplTranslation._source_codes) & set(DeeplTranslation._target_codes)

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> Result:
        """Translates the given content from source language to target language using DeepL.

        Raises:
            NotSupportedLanguagesError: If the specified languages are not supported by DeepL.
            TranslationQuotaExceededError: If the translation quota has been exceeded.
            TranslationRateLimitError: If DeepL rate-limits the request.
            ProviderTimeoutError: If the DeepL server cannot be reached in time.
            TranslateExceptionError: If an error occurs during the translation process.
        """
        logger.debug("'src_lang': '%s', 'tgt_lang': '%s'", src_lang, tgt_lang)
        try:
            _src_lang: str = DeeplTranslation._source_codes[src_lang]
            _tgt_lang: str = DeeplTranslation._target_codes[tgt_lang]
        except KeyError:
            msg: str = (
                f"Languages not supported by DeepL. Source language: '{src_lang}'. Target language: '{tgt_lang}'."
            )
            raise NotSupportedLanguagesError(msg) from None

        try:
            results: TextResult | list[TextResult] = await asyncio.to_thread(
                self._inst.translate_text,
                content,
                source_lang=_src_lang,
                target_lang=_tgt_lang,
            )
        except QuotaExceededException as err:
            self.__available = False
            raise TranslationQuotaExceededError(err) from None
        except AuthorizationException:
            self.__available = False
            msg = "Authorisation failed. Please check your authentication key"
            raise TranslateExceptionError(msg) from None
        except TooManyRequestsException as err:
            msg = "DeepL rate limit reached"
            raise TranslationRateLimitError(msg) from err
        except ConnectionException:
            msg = "An error occurred when connecting to the DeepL server"
            raise ProviderTimeoutError(msg) from None
        except (DeepLException, ValueError, TypeError):
            msg = "An anomaly occurred during the translation process at DeepL"
            raise TranslateExceptionError(msg) from None

        logger.info("translation completed (%s > %s)", _src_lang, _tgt_lang)
        return self._build_result(results)

    def _build_result(self, results: TextResult | list[TextResult]) -> Result:
        """Build a Result from a single TextResult or the first element of a list."""
        if isinstance(results, list) and results:
            result: TextResult = results[0]
        elif isinstance(results, TextResult):
            result = results
        else:
            msg = "An anomaly occurred during the translation process at DeepL"
            raise MalformedResponseError(msg)

        if not result.text or not result.text.strip():
            msg = "DeepL returned no translation"
            raise MalformedResponseError(msg)

        return Result(
            text=result.text,
            detected_source_lang=result.detected_source_lang.lower() if result.detected_source_lang else None,
            metadata={"engine": "deepl"},
        )

    async def close(self) -> None:
        self.__available = False
        self.__inst = None
        logger.debug("'%s' process termination", self.__class__.__name__)
