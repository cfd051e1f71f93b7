"""Unicode code point ranges per ISO 15924 script, used for script-consistency scoring."""

from __future__ import annotations

from typing import Final, TypeAlias

__all__: list[str] = ["SCRIPT_RANGES", "count_in_script"]

CodePointRange: TypeAlias = tuple[int, int]

SCRIPT_RANGES: Final[dict[str, tuple[CodePointRange, ...]]] = {
    # Basic Latin is included so that ASCII digits, spaces and punctuation count as Latin.
    "Latn": ((0x0000, 0x007F), (0x0080, 0x00FF), (0x0100, 0x017F), (0x0180, 0x024F), (0x1E00, 0x1EFF)),
    "Cyrl": ((0x0400, 0x04FF), (0x0500, 0x052F)),
    "Arab": ((0x0600, 0x06FF), (0x0750, 0x077F), (0x08A0, 0x08FF), (0xFB50, 0xFDFF), (0xFE70, 0xFEFF)),
    "Deva": ((0x0900, 0x097F),),
    "Beng": ((0x0980, 0x09FF),),
    "Guru": ((0x0A00, 0x0A7F),),
    "Gujr": ((0x0A80, 0x0AFF),),
    "Orya": ((0x0B00, 0x0B7F),),
    "Taml": ((0x0B80, 0x0BFF),),
    "Telu": ((0x0C00, 0x0C7F),),
    "Knda": ((0x0C80, 0x0CFF),),
    "Mlym": ((0x0D00, 0x0D7F),),
    "Sinh": ((0x0D80, 0x0DFF),),
    "Thai": ((0x0E00, 0x0E7F),),
    "Laoo": ((0x0E80, 0x0EFF),),
    "Mymr": ((0x1000, 0x109F),),
    "Khmr": ((0x1780, 0x17FF),),
    "Hans": ((0x4E00, 0x9FFF), (0x3400, 0x4DBF)),
    "Hant": ((0x4E00, 0x9FFF), (0x3400, 0x4DBF)),
    "Jpan": ((0x3040, 0x309F), (0x30A0, 0x30FF), (0x4E00, 0x9FFF)),
    "Hang": ((0xAC00, 0xD7AF), (0x1100, 0x11FF)),
    "Grek": ((0x0370, 0x03FF),),
    "Hebr": ((0x0590, 0x05FF),),
    "Armn": ((0x0530, 0x058F),),
    "Geor": ((0x10A0, 0x10FF),),
    "Ethi": ((0x1200, 0x137F),),
    "Tibt": ((0x0F00, 0x0FFF),),
    "Syrc": ((0x0700, 0x074F),),
    "Bugi": ((0x1A00, 0x1A1F),),
    "Olck": ((0x1C50, 0x1C7F),),
    "Mtei": ((0xAAE0, 0xAAFF),),
}


def count_in_script(text: str, ranges: tuple[CodePointRange, ...]) -> int:
    """Count the code points of ``text`` that fall inside any of ``ranges``."""
    return sum(1 for char in text if any(start <= ord(char) <= end for start, end in ranges))
