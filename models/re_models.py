"""Regular expressions used by sanitisation, quality scoring and language-code validation."""

from __future__ import annotations

import re
from re import Pattern
from typing import Final

__all__: list[str] = [
    "ERROR_PREFIX_PATTERN",
    "EVENT_HANDLER_ATTRIBUTE_PATTERN",
    "LANGUAGE_CODE_PATTERN",
    "LANGUAGE_SEPARATOR_PATTERN",
    "RTL_CHARACTER_PATTERN",
    "SCRIPT_BLOCK_PATTERN",
]

# Complete <script>...</script> blocks, tolerating nested '<' inside the body
# Example: "<script>alert(1)</script>"
SCRIPT_BLOCK_PATTERN: Final[Pattern[str]] = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    re.IGNORECASE,
)

# Inline event handler attributes with a quoted value
# Examples: 'onclick="steal()"', "onload = 'x()'"
EVENT_HANDLER_ATTRIBUTE_PATTERN: Final[Pattern[str]] = re.compile(
    r"""on\w+\s*=\s*["'][^"']*["']""",
    re.IGNORECASE,
)

# Candidate texts that are really backend error messages
# Examples: "Error: model not found", "Translation failed"
ERROR_PREFIX_PATTERN: Final[Pattern[str]] = re.compile(
    r"^(?:error|failed|translation failed|unable to translate|not supported)",
    re.IGNORECASE,
)

# Hebrew, Syriac and the Arabic blocks (base, supplement, extended-A, presentation forms A/B)
RTL_CHARACTER_PATTERN: Final[Pattern[str]] = re.compile(
    r"[\u0590-\u05FF\u0600-\u06FF\u0700-\u074F\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)

# Bare language code: two or three ASCII letters
LANGUAGE_CODE_PATTERN: Final[Pattern[str]] = re.compile(r"^[a-z]{2,3}$")

# Region or script suffix separator in tags such as "en-US" or "zh_Hant"
LANGUAGE_SEPARATOR_PATTERN: Final[Pattern[str]] = re.compile(r"[-_]")
