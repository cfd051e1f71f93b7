"""This module defines the abstract base class for translation providers and related exceptions.
It includes the Result data class for translation results, the EngineAttributes describing each provider,
and the error hierarchy used between providers and the orchestrator.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config

__all__: list[str] = [
    "AllProvidersFailedError",
    "BackendUnavailableError",
    "EngineAttributes",
    "MalformedResponseError",
    "NoProvidersAvailableError",
    "NotSupportedLanguagesError",
    "ProviderTimeoutError",
    "Result",
    "TransInterface",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
    "TranslationValidationError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class EngineAttributes:
    """Provider-specific capabilities and scheduling settings.

    Attributes:
        name (str): Distinguished name of the provider.
        priority (int): Higher values are tried first and win score ties.
        timeout (float): Per-call timeout in seconds.
        supports_batch (bool): Whether the provider translates a list of texts in one call.
        batch_size (int): Maximum number of texts per native batch call.
    """

    name: str
    priority: int = 0
    timeout: float = 10.0
    supports_batch: bool = False
    batch_size: int = 1


@dataclass
class Result:
    """Data class for translation results.

    Attributes:
        text (str | None): Translated text. None if translation fails.
        detected_source_lang (str | None): Detected source language code, when the backend reports one.
        metadata (dict[str, str] | None): Provider-specific metadata (e.g., model id).
    """

    text: str | None = None
    detected_source_lang: str | None = None
    metadata: dict[str, str] | None = None

    def __str__(self) -> str:
        if self.text is None:
            return ""
        return self.text


class TranslateExceptionError(Exception):
    """An error occurred during the translation process."""


class NotSupportedLanguagesError(TranslateExceptionError):
    """The provider cannot translate the requested language pair."""


class ProviderTimeoutError(TranslateExceptionError):
    """The provider did not answer within its timeout."""


class BackendUnavailableError(TranslateExceptionError):
    """The backend is temporarily unavailable (e.g., the model is still loading)."""


class MalformedResponseError(TranslateExceptionError):
    """The backend answered with a body that contains no usable translation."""


class TranslationQuotaExceededError(TranslateExceptionError):
    """The translatable character quota has been exceeded."""


class TranslationRateLimitError(TranslateExceptionError):
    """The translation request was rate-limited by the API."""


class NoProvidersAvailableError(TranslateExceptionError):
    """No provider is available for the request."""


class AllProvidersFailedError(TranslateExceptionError):
    """Every provider failed, in the parallel race and in the sequential fallback.

    Attributes:
        errors (list[tuple[str, Exception]]): (provider name, error) for every failed attempt, in attempt order.
    """

    def __init__(self, errors: list[tuple[str, Exception]]) -> None:
        self.errors: list[tuple[str, Exception]] = list(errors)
        details: str = "; ".join(f"{name}: {err or type(err).__name__}" for name, err in self.errors)
        super().__init__(f"All translation providers failed. {details}")


class TranslationValidationError(ValueError):
    """The translation request is malformed (empty text, invalid language code)."""


class TransInterface(ABC):
    """Abstract base class for translation providers.

    Attributes:
        registered (ClassVar[dict[str, type[TransInterface]]]): Registered provider classes,
            keyed by their distinguished names.
    """

    registered: ClassVar[dict[str, type[TransInterface]]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass in the registered dictionary.

        Subclasses returning an empty name (abstract intermediates) are not registered.

        Args:
            **kwargs: Additional keyword arguments passed to parent class.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_engine_name") or not callable(cls.fetch_engine_name):
            msg = "Subclasses of TransInterface must implement the static method fetch_engine_name()."
            raise TypeError(msg)

        if not isinstance(cls.fetch_engine_name(), str) or cls.fetch_engine_name() == "":
            return

        if cls.fetch_engine_name() in cls.registered:
            msg: str = f"A translation engine with the name '{cls.fetch_engine_name()}' is already registered."
            raise ValueError(msg)

        cls.registered[cls.fetch_engine_name()] = cls

    def __init__(self) -> None:
        self._engine_attributes: EngineAttributes | None = None

    @property
    def engine_attributes(self) -> EngineAttributes:
        """Get the engine attributes.

        Raises:
            RuntimeError: If the attributes have not been set by ``initialize``.
        """
        if self._engine_attributes is None:
            msg = "Engine attributes have not been set."
            raise RuntimeError(msg)
        return self._engine_attributes

    @engine_attributes.setter
    def engine_attributes(self, attributes: EngineAttributes) -> None:
        if self._engine_attributes is not None:
            msg = "Engine attributes can only be set once during initialization."
            raise RuntimeError(msg)
        self._engine_attributes = attributes

    @property
    def engine_name(self) -> str:
        return self.engine_attributes.name

    @property
    def priority(self) -> int:
        return self.engine_attributes.priority

    @property
    def timeout(self) -> float:
        return self.engine_attributes.timeout

    @property
    def supports_batch(self) -> bool:
        return self.engine_attributes.supports_batch

    @property
    def batch_size(self) -> int:
        return self.engine_attributes.batch_size

    def is_rate_limit_error(self, err: Exception) -> bool:
        """Check if the given exception indicates rate limiting.

        Args:
            err (Exception): Exception raised during translation.

        Returns:
            bool: True if the exception represents rate limiting.
        """
        return isinstance(err, TranslationRateLimitError)

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider can currently take requests.

        Returns:
            bool: True if the provider is available, False otherwise.
        """
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Fetch the distinguished name of the provider.

        This method is called during class registration in __init_subclass__,
        so the implementation must be available at subclass definition time.

        Returns:
            str: The distinguished name of the provider.
        """
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the provider with the given configuration.

        Args:
            config (Config): Configuration object containing settings for the provider.

        Raises:
            RuntimeError: If the provider cannot be set up.
            TranslateExceptionError: If authentication fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> Result:
        """Translate input text to the target language.

        Args:
            content (str): Text to be translated.
            tgt_lang (str): Target language code.
            src_lang (str): Source language code.

        Returns:
            Result: Translation result with non-empty translated text.

        Raises:
            NotSupportedLanguagesError: If the language pair is not supported.
            ProviderTimeoutError: If the backend does not answer in time.
            BackendUnavailableError: If the backend is temporarily unavailable.
            MalformedResponseError: If the response contains no translation.
            TranslateExceptionError: If translation fails for any other reason.
        """
        raise NotImplementedError

    async def translation_batch(self, contents: list[str], tgt_lang: str, src_lang: str) -> list[str]:
        """Translate several texts in one backend call.

        Only providers with ``supports_batch`` implement this.

        Returns:
            list[str]: Translations in input order.
        """
        _ = contents, tgt_lang, src_lang
        msg: str = f"'{self.fetch_engine_name()}' does not support batch translation"
        raise TranslateExceptionError(msg)

    @abstractmethod
    def get_supported_languages(self) -> set[str]:
        """Language codes this provider can translate between."""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the provider."""
        raise NotImplementedError

    @classmethod
    def authentication_env_name(cls) -> str:
        """Name of the environment variable holding the API key, e.g. ``LIBRETRANSLATE_API_KEY``."""
        return f"{cls.fetch_engine_name().upper()}_API_KEY"

    def get_authentication_key(self) -> str:
        """Retrieve the authentication key from the environment.

        Returns:
            str: The authentication key, or an empty string if the environment variable is not set.
        """
        return os.getenv(self.authentication_env_name(), "")
