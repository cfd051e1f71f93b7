"""Static language table.

Maps language codes to (English name, ISO 15924 script, right-to-left flag), plus the legacy
and bibliographic codes that are still seen in the wild.
"""

from __future__ import annotations

from typing import Final

__all__: list[str] = ["LANGUAGES", "LEGACY_CODES"]

LANGUAGES: Final[dict[str, tuple[str, str, bool]]] = {
    "af": ("Afrikaans", "Latn", False),
    "am": ("Amharic", "Ethi", False),
    "ar": ("Arabic", "Arab", True),
    "as": ("Assamese", "Beng", False),
    "az": ("Azerbaijani", "Latn", False),
    "be": ("Belarusian", "Cyrl", False),
    "bg": ("Bulgarian", "Cyrl", False),
    "bn": ("Bengali", "Beng", False),
    "bo": ("Tibetan", "Tibt", False),
    "bs": ("Bosnian", "Latn", False),
    "ca": ("Catalan", "Latn", False),
    "ceb": ("Cebuano", "Latn", False),
    "cs": ("Czech", "Latn", False),
    "cy": ("Welsh", "Latn", False),
    "da": ("Danish", "Latn", False),
    "de": ("German", "Latn", False),
    "dv": ("Dhivehi", "Thaa", True),
    "el": ("Greek", "Grek", False),
    "en": ("English", "Latn", False),
    "eo": ("Esperanto", "Latn", False),
    "es": ("Spanish", "Latn", False),
    "et": ("Estonian", "Latn", False),
    "eu": ("Basque", "Latn", False),
    "fa": ("Persian", "Arab", True),
    "fi": ("Finnish", "Latn", False),
    "fr": ("French", "Latn", False),
    "ga": ("Irish", "Latn", False),
    "gd": ("Scottish Gaelic", "Latn", False),
    "gl": ("Galician", "Latn", False),
    "gu": ("Gujarati", "Gujr", False),
    "ha": ("Hausa", "Latn", False),
    "he": ("Hebrew", "Hebr", True),
    "hi": ("Hindi", "Deva", False),
    "hr": ("Croatian", "Latn", False),
    "hu": ("Hungarian", "Latn", False),
    "hy": ("Armenian", "Armn", False),
    "id": ("Indonesian", "Latn", False),
    "ig": ("Igbo", "Latn", False),
    "is": ("Icelandic", "Latn", False),
    "it": ("Italian", "Latn", False),
    "ja": ("Japanese", "Jpan", False),
    "jv": ("Javanese", "Latn", False),
    "ka": ("Georgian", "Geor", False),
    "kk": ("Kazakh", "Cyrl", False),
    "km": ("Khmer", "Khmr", False),
    "kn": ("Kannada", "Knda", False),
    "ko": ("Korean", "Hang", False),
    "ku": ("Kurdish", "Latn", False),
    "ky": ("Kyrgyz", "Cyrl", False),
    "lo": ("Lao", "Laoo", False),
    "lt": ("Lithuanian", "Latn", False),
    "lv": ("Latvian", "Latn", False),
    "mi": ("Maori", "Latn", False),
    "mk": ("Macedonian", "Cyrl", False),
    "ml": ("Malayalam", "Mlym", False),
    "mn": ("Mongolian", "Cyrl", False),
    "mni": ("Manipuri", "Mtei", False),
    "mr": ("Marathi", "Deva", False),
    "ms": ("Malay", "Latn", False),
    "mt": ("Maltese", "Latn", False),
    "my": ("Burmese", "Mymr", False),
    "ne": ("Nepali", "Deva", False),
    "nl": ("Dutch", "Latn", False),
    "no": ("Norwegian", "Latn", False),
    "or": ("Odia", "Orya", False),
    "pa": ("Punjabi", "Guru", False),
    "pl": ("Polish", "Latn", False),
    "ps": ("Pashto", "Arab", True),
    "pt": ("Portuguese", "Latn", False),
    "ro": ("Romanian", "Latn", False),
    "ru": ("Russian", "Cyrl", False),
    "sat": ("Santali", "Olck", False),
    "sd": ("Sindhi", "Arab", True),
    "si": ("Sinhala", "Sinh", False),
    "sk": ("Slovak", "Latn", False),
    "sl": ("Slovenian", "Latn", False),
    "so": ("Somali", "Latn", False),
    "sq": ("Albanian", "Latn", False),
    "sr": ("Serbian", "Cyrl", False),
    "su": ("Sundanese", "Latn", False),
    "sv": ("Swedish", "Latn", False),
    "sw": ("Swahili", "Latn", False),
    "syr": ("Syriac", "Syrc", True),
    "ta": ("Tamil", "Taml", False),
    "te": ("Telugu", "Telu", False),
    "th": ("Thai", "Thai", False),
    "ti": ("Tigrinya", "Ethi", False),
    "tl": ("Tagalog", "Latn", False),
    "tr": ("Turkish", "Latn", False),
    "ug": ("Uyghur", "Arab", True),
    "uk": ("Ukrainian", "Cyrl", False),
    "ur": ("Urdu", "Arab", True),
    "uz": ("Uzbek", "Latn", False),
    "vi": ("Vietnamese", "Latn", False),
    "xh": ("Xhosa", "Latn", False),
    "yi": ("Yiddish", "Hebr", True),
    "yo": ("Yoruba", "Latn", False),
    "zh": ("Chinese", "Hans", False),
    "zu": ("Zulu", "Latn", False),
}

# Bibliographic ISO 639-2 codes and withdrawn ISO 639-1 codes
LEGACY_CODES: Final[dict[str, str]] = {
    "alb": "sq",
    "arm": "hy",
    "baq": "eu",
    "bur": "my",
    "chi": "zh",
    "cze": "cs",
    "dut": "nl",
    "fre": "fr",
    "geo": "ka",
    "ger": "de",
    "gre": "el",
    "ice": "is",
    "mac": "mk",
    "mao": "mi",
    "may": "ms",
    "per": "fa",
    "rum": "ro",
    "slo": "sk",
    "tib": "bo",
    "wel": "cy",
    "iw": "he",
    "ji": "yi",
    "in": "id",
    "jw": "jv",
    "mo": "ro",
    "nb": "no",
    "nn": "no",
    "sh": "sr",
}
