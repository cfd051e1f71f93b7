"""Backend model registry.

Resolves a (provider, source language, target language) triple to the backend model and the
language codes that model expects. Two catalog shapes are supported:

- multilingual: one model serves every pair of its languages, with an optional per-language code map;
- pairwise: one model per (source, target) pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache
from typing import TYPE_CHECKING, Self

from core.trans.engines.const_models import (
    LIBRETRANSLATE_LANGUAGES,
    M2M100_LANGUAGES,
    M2M100_MODEL_ID,
    NLLB_CODES,
    NLLB_LANGUAGES,
    NLLB_MODEL_ID,
    OPUS_MT_MODELS,
)
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Iterable, Mapping

__all__: list[str] = ["BackendDescriptor", "ModelRegistry"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass(frozen=True)
class BackendDescriptor:
    """Everything a provider needs to address one language pair.

    Attributes:
        provider (str): Provider name.
        model_id (str): Backend model identifier; empty for backends without model selection.
        src_code (str): Source language code in the backend's notation.
        tgt_code (str): Target language code in the backend's notation.
    """

    provider: str
    model_id: str
    src_code: str
    tgt_code: str


@dataclass(frozen=True)
class _MultilingualCatalog:
    model_id: str
    languages: frozenset[str]
    to_backend_code: Callable[[str], str]

    def resolve(self, provider: str, src_lang: str, tgt_lang: str) -> BackendDescriptor | None:
        if src_lang not in self.languages or tgt_lang not in self.languages:
            return None
        return BackendDescriptor(provider, self.model_id, self.to_backend_code(src_lang), self.to_backend_code(tgt_lang))


@dataclass(frozen=True)
class _PairwiseCatalog:
    models: Mapping[tuple[str, str], str]
    languages: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", frozenset(code for pair in self.models for code in pair))

    def resolve(self, provider: str, src_lang: str, tgt_lang: str) -> BackendDescriptor | None:
        model_id: str | None = self.models.get((src_lang, tgt_lang))
        if model_id is None:
            return None
        return BackendDescriptor(provider, model_id, src_lang, tgt_lang)


class ModelRegistry:
    """Lookup of backend models per provider."""

    def __init__(self) -> None:
        self._catalogs: dict[str, _MultilingualCatalog | _PairwiseCatalog] = {}

    def register_multilingual(
        self,
        provider: str,
        *,
        model_id: str,
        languages: Iterable[str],
        codes: Mapping[str, str] | None = None,
        default_code: Callable[[str], str] | None = None,
    ) -> None:
        """Register a provider whose single model covers every pair of ``languages``.

        Args:
            provider (str): Provider name.
            model_id (str): Backend model identifier.
            languages (Iterable[str]): Supported language codes.
            codes (Mapping[str, str] | None): Backend notation per language code.
            default_code (Callable[[str], str] | None): Notation for languages missing from ``codes``.
                Defaults to the code itself.
        """
        code_map: dict[str, str] = dict(codes or {})
        fallback: Callable[[str], str] = default_code or (lambda code: code)
        self._catalogs[provider] = _MultilingualCatalog(
            model_id=model_id,
            languages=frozenset(languages),
            to_backend_code=lambda code: code_map.get(code) or fallback(code),
        )

    def register_pairwise(self, provider: str, models: Mapping[tuple[str, str], str]) -> None:
        """Register a provider with one model per (source, target) pair."""
        self._catalogs[provider] = _PairwiseCatalog(models=dict(models))

    def resolve(self, provider: str, src_lang: str, tgt_lang: str) -> BackendDescriptor | None:
        """Resolve a language pair for a provider.

        Returns:
            BackendDescriptor | None: The descriptor, or None when the provider or pair is unknown.
        """
        catalog = self._catalogs.get(provider)
        if catalog is None:
            logger.debug("No model catalog registered for provider '%s'", provider)
            return None
        return catalog.resolve(provider, src_lang, tgt_lang)

    def supported_languages(self, provider: str) -> set[str]:
        catalog = self._catalogs.get(provider)
        return set(catalog.languages) if catalog is not None else set()

    @classmethod
    @cache
    def default(cls) -> Self:
        """Registry built from the static backend catalogs, created once per process."""
        registry: Self = cls()
        registry.register_multilingual(
            "libretranslate", model_id="", languages=LIBRETRANSLATE_LANGUAGES, codes=LIBRETRANSLATE_LANGUAGES
        )
        registry.register_multilingual(
            "nllb",
            model_id=NLLB_MODEL_ID,
            languages=NLLB_LANGUAGES,
            codes=NLLB_CODES,
            default_code=lambda code: f"{code}_Latn",
        )
        registry.register_pairwise("opus_mt", OPUS_MT_MODELS)
        registry.register_multilingual("m2m100", model_id=M2M100_MODEL_ID, languages=M2M100_LANGUAGES)
        logger.debug("Default model registry built for providers: %s", list(registry._catalogs))
        return registry
