"""Language-code normalisation and the static language table."""

from core.language.validator import LanguageValidator

__all__: list[str] = ["LanguageValidator"]
