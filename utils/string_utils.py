from __future__ import annotations

import hashlib
import unicodedata

from models.re_models import EVENT_HANDLER_ATTRIBUTE_PATTERN, SCRIPT_BLOCK_PATTERN

__all__: list[str] = ["StringUtils"]


class StringUtils:
    """Utility class for string manipulation and processing.

    Provides static methods for type coercion, input sanitisation
    and the hashing used to build cache and in-flight keys.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def sanitize_text(value: str) -> str:
        """Remove script blocks and inline event handler attributes, then trim.

        Args:
            value (str): Raw text received from the caller.

        Returns:
            str: Text that is safe to forward to a translation backend.
        """
        value = StringUtils.ensure_str(value)
        value = SCRIPT_BLOCK_PATTERN.sub("", value)
        value = EVENT_HANDLER_ATTRIBUTE_PATTERN.sub("", value)
        return value.strip()

    @staticmethod
    def normalize_text(text: str) -> str:
        """Normalize text using Unicode NFC normalization."""
        return unicodedata.normalize("NFC", text)

    @staticmethod
    def generate_hash_key(source_text: str, source_lang: str, target_lang: str) -> str:
        """Generate a SHA-256 hash identifying a translation request.

        The source text is NFC-normalized first so that visually identical inputs share a key.

        Args:
            source_text (str): Text to be translated.
            source_lang (str): Source language code.
            target_lang (str): Target language code.

        Returns:
            str: Hex digest of the request parameters.
        """
        normalized_source: str = StringUtils.normalize_text(source_text)
        key_data: str = f"{normalized_source}|{source_lang}|{target_lang}"
        return hashlib.sha256(key_data.encode("utf-8")).hexdigest()

    @staticmethod
    def generate_translation_key(source_text: str, source_lang: str, target_lang: str) -> str:
        """Build the namespaced cache key ``translation:{src}:{tgt}:{hash}``."""
        digest: str = StringUtils.generate_hash_key(source_text, source_lang, target_lang)
        return f"translation:{source_lang}:{target_lang}:{digest}"
