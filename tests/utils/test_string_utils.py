from __future__ import annotations

import pytest

from utils.string_utils import StringUtils


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Hello <script>alert(1)</script>world", "Hello world"),
        ('<b onclick="steal()">Hi</b>', "<b >Hi</b>"),
        ("  padded  ", "padded"),
        ("<SCRIPT>x</SCRIPT>", ""),
        ("plain text", "plain text"),
    ],
)
def test_sanitize_text(value: str, expected: str) -> None:
    assert StringUtils.sanitize_text(value) == expected


def test_ensure_str() -> None:
    assert StringUtils.ensure_str(None) == ""
    assert StringUtils.ensure_str("x") == "x"


def test_hash_key_is_nfc_normalized() -> None:
    decomposed: str = "cafe\u0301"
    composed: str = "caf\u00e9"

    assert StringUtils.generate_hash_key(decomposed, "fr", "en") == StringUtils.generate_hash_key(composed, "fr", "en")


def test_hash_key_depends_on_languages() -> None:
    assert StringUtils.generate_hash_key("Hello", "en", "es") != StringUtils.generate_hash_key("Hello", "en", "fr")
    assert StringUtils.generate_hash_key("Hello", "en", "es") != StringUtils.generate_hash_key("Hello", "de", "es")


def test_generate_translation_key_format() -> None:
    key: str = StringUtils.generate_translation_key("Hello", "en", "es")

    assert key.startswith("translation:en:es:")
    assert key.endswith(StringUtils.generate_hash_key("Hello", "en", "es"))
