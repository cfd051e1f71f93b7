from __future__ import annotations

from typing import TYPE_CHECKING

from core.language.const_languages import LANGUAGES, LEGACY_CODES
from models.language_models import LanguageInfo, LanguageValidation
from models.re_models import LANGUAGE_CODE_PATTERN, LANGUAGE_SEPARATOR_PATTERN
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["LanguageValidator"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class LanguageValidator:
    """Normalises and validates language codes against the static language table.

    Accepts tags such as ``"EN"``, ``"en-US"``, ``"zh_Hant"`` or legacy codes like ``"iw"`` and
    reduces them to the base code used throughout the translator.
    """

    @staticmethod
    def normalize_code(code: str) -> str:
        """Lower-case the code, drop any region/script suffix and map legacy codes.

        Args:
            code (str): Raw language code or tag.

        Returns:
            str: Normalised base code. Not guaranteed to be a known language.
        """
        base: str = LANGUAGE_SEPARATOR_PATTERN.split(code.strip().lower(), maxsplit=1)[0]
        return LEGACY_CODES.get(base, base)

    @staticmethod
    def get_language_info(code: str) -> LanguageInfo | None:
        """Look up metadata for a normalised code. Returns None for unknown languages."""
        entry: tuple[str, str, bool] | None = LANGUAGES.get(code)
        if entry is None:
            return None
        name, script, rtl = entry
        return LanguageInfo(code=code, name=name, script=script, rtl=rtl)

    @classmethod
    def validate(cls, code: str | None) -> LanguageValidation:
        """Validate a language code.

        Args:
            code (str | None): Raw language code or tag.

        Returns:
            LanguageValidation: ``valid`` is True only for well-formed codes present in the table.
        """
        if not code or not code.strip():
            return LanguageValidation(valid=False, error="Language code is empty")

        normalized: str = cls.normalize_code(code)
        if not LANGUAGE_CODE_PATTERN.match(normalized):
            return LanguageValidation(
                valid=False,
                normalized_code=normalized,
                error=f"Invalid language code format: '{code}'",
            )

        info: LanguageInfo | None = cls.get_language_info(normalized)
        if info is None:
            logger.debug("Unknown language code: '%s' (normalized: '%s')", code, normalized)
            return LanguageValidation(
                valid=False,
                normalized_code=normalized,
                error=f"Unsupported language code: '{code}'",
            )
        return LanguageValidation(valid=True, normalized_code=normalized, info=info)

    @classmethod
    def is_rtl(cls, code: str) -> bool:
        info: LanguageInfo | None = cls.get_language_info(cls.normalize_code(code))
        return info.rtl if info is not None else False
