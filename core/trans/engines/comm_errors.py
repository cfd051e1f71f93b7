from __future__ import annotations

from typing import Final

from core.trans.interface import (
    BackendUnavailableError,
    ProviderTimeoutError,
    TranslateExceptionError,
    TranslationRateLimitError,
)
from handlers.async_comm import AsyncCommError, AsyncCommTimeoutError

__all__: list[str] = ["HTTP_SERVICE_UNAVAILABLE", "HTTP_TOO_MANY_REQUESTS", "map_comm_error"]

HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_SERVICE_UNAVAILABLE: Final[int] = 503


def map_comm_error(name: str, err: AsyncCommError) -> TranslateExceptionError:
    """Translate a transport error into the provider error hierarchy.

    Args:
        name (str): Provider name used in the message.
        err (AsyncCommError): Error raised by ``AsyncHttp``.

    Returns:
        TranslateExceptionError: ``ProviderTimeoutError`` for timeouts, ``BackendUnavailableError`` for 503,
        ``TranslationRateLimitError`` for 429 and ``TranslateExceptionError`` for anything else.
    """
    if isinstance(err, AsyncCommTimeoutError):
        return ProviderTimeoutError(f"{name} translation request timeout")
    if err.status == HTTP_SERVICE_UNAVAILABLE:
        return BackendUnavailableError(f"{name} model is loading, please retry")
    if err.status == HTTP_TOO_MANY_REQUESTS:
        return TranslationRateLimitError(f"{name} rate limit reached")
    return TranslateExceptionError(f"{name} API error: {err}")
