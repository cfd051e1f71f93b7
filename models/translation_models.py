"""Models for translation requests, provider attempts and the outcome returned to callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.quality_models import QualityScore

__all__: list[str] = ["ProviderResult", "TranslationOutcome", "TranslationRequest"]


@dataclass(frozen=True)
class TranslationRequest:
    """A single unit of translation work.

    Attributes:
        text (str): Source text. Non-empty after sanitisation.
        tgt_lang (str): Target language code.
        src_lang (str): Source language code.
    """

    text: str
    tgt_lang: str
    src_lang: str = "en"


@dataclass
class ProviderResult:
    """Outcome of one provider attempt within a race.

    Exactly one of ``text`` and ``error`` is set.

    Attributes:
        provider (str): Distinguished name of the provider.
        text (str | None): Translated text on success.
        error (Exception | None): Failure raised by the provider.
        elapsed_ms (float): Wall-clock time of the attempt in milliseconds.
    """

    provider: str
    text: str | None = None
    error: Exception | None = None
    elapsed_ms: float = 0.0

    def __post_init__(self) -> None:
        if (self.text is None) == (self.error is None):
            msg = "ProviderResult requires exactly one of 'text' or 'error'."
            raise ValueError(msg)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class TranslationOutcome:
    """Result handed back to the caller.

    Attributes:
        text (str): Selected translation.
        provider (str): Provider that produced it, or the provider recorded in the cache entry.
        quality (QualityScore | None): Score of the selected candidate. None for cache hits.
        from_cache (bool): Whether the text was served from the cache.
    """

    text: str
    provider: str
    quality: QualityScore | None = None
    from_cache: bool = False

    def __str__(self) -> str:
        return self.text
