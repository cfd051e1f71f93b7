"""Translation providers and the orchestrator that races them.

This package provides the provider interface, the model registry that maps language pairs to
backend models, the concrete provider implementations and ``TransManager``.
"""

from core.trans.interface import (
    AllProvidersFailedError,
    BackendUnavailableError,
    MalformedResponseError,
    NoProvidersAvailableError,
    NotSupportedLanguagesError,
    ProviderTimeoutError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
    TranslationValidationError,
)
from core.trans.manager import TransManager
from core.trans.registry import BackendDescriptor, ModelRegistry

__all__: list[str] = [
    "AllProvidersFailedError",
    "BackendDescriptor",
    "BackendUnavailableError",
    "MalformedResponseError",
    "ModelRegistry",
    "NoProvidersAvailableError",
    "NotSupportedLanguagesError",
    "ProviderTimeoutError",
    "Result",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
    "TranslationValidationError",
]
