"""Models for language metadata and validation results."""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["LanguageInfo", "LanguageValidation"]


@dataclass(frozen=True)
class LanguageInfo:
    """Static metadata for a language.

    Attributes:
        code (str): ISO 639-1 (or 639-3 when no two-letter code exists) language code.
        name (str): English name.
        script (str): ISO 15924 code of the dominant writing system (e.g. "Latn", "Jpan").
        rtl (bool): Whether the script is written right to left.
    """

    code: str
    name: str
    script: str
    rtl: bool = False


@dataclass(frozen=True)
class LanguageValidation:
    valid: bool
    normalized_code: str | None = None
    error: str | None = None
    info: LanguageInfo | None = None
