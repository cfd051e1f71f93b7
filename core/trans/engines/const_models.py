"""Static backend catalogs.

Language coverage and model identifiers of each backend. ``ModelRegistry.default()`` is built from
these tables; providers never read them directly.
"""

from __future__ import annotations

from typing import Final

__all__: list[str] = [
    "LIBRETRANSLATE_LANGUAGES",
    "M2M100_LANGUAGES",
    "M2M100_MODEL_ID",
    "NLLB_CODES",
    "NLLB_LANGUAGES",
    "NLLB_MODEL_ID",
    "OPUS_MT_MODELS",
]

LIBRETRANSLATE_LANGUAGES: Final[dict[str, str]] = {
    code: code
    for code in (
        "en", "es", "fr", "de", "it", "pt", "ru", "ja", "zh", "pl", "nl", "sv",
        "da", "no", "fi", "el", "cs", "hu", "ro", "sk", "sl", "bg", "hr", "et",
        "lv", "lt", "uk", "tr", "id", "ko", "ar", "he", "fa", "hi", "th", "vi",
        "ms", "sw", "af", "ga", "cy", "is", "mt", "mk", "sr", "bs", "sq", "be",
        "ka", "hy", "az", "kk", "ky", "uz", "mn", "bn", "ta", "te", "mr", "gu",
        "kn", "ml", "pa", "ne", "si", "my", "km", "lo", "tl", "jv", "su", "zu",
        "xh", "am", "ha", "yo", "ig", "ur", "yi", "sd", "ug", "ku", "or", "as",
        "ceb",
    )
}  # fmt: skip

NLLB_MODEL_ID: Final[str] = "facebook/nllb-200-3.3B"

NLLB_LANGUAGES: Final[frozenset[str]] = frozenset(
    (
        "en", "es", "fr", "de", "it", "pt", "ru", "ja", "zh", "pl", "nl", "sv",
        "da", "no", "fi", "el", "cs", "hu", "ro", "sk", "sl", "bg", "hr", "et",
        "lv", "lt", "uk", "tr", "id", "ko", "ar", "he", "fa", "hi", "bn", "ta",
        "te", "mr", "gu", "kn", "ml", "pa", "th", "vi", "ms", "sw", "af", "zu",
        "xh", "am", "ha", "yo", "ig", "ur", "yi", "sd", "ug", "ku", "or", "as",
        "ne", "si", "my", "km", "lo", "tl", "jv", "su", "ceb", "ga", "cy", "gd",
        "is", "mt", "mk", "sr", "bs", "sq", "be", "ka", "hy", "az", "kk", "ky",
        "uz", "mn",
    )
)  # fmt: skip

# Language + script tags; NLLB_LANGUAGES members without an entry use "{code}_Latn".
NLLB_CODES: Final[dict[str, str]] = {
    "en": "eng_Latn",
    "es": "spa_Latn",
    "fr": "fra_Latn",
    "de": "deu_Latn",
    "it": "ita_Latn",
    "pt": "por_Latn",
    "ru": "rus_Cyrl",
    "ja": "jpn_Jpan",
    "zh": "zho_Hans",
    "ar": "arb_Arab",
    "hi": "hin_Deva",
    "ko": "kor_Hang",
    "th": "tha_Thai",
    "vi": "vie_Latn",
    "tr": "tur_Latn",
    "pl": "pol_Latn",
    "nl": "nld_Latn",
    "sv": "swe_Latn",
    "da": "dan_Latn",
    "no": "nob_Latn",
    "fi": "fin_Latn",
    "el": "ell_Grek",
    "cs": "ces_Latn",
    "hu": "hun_Latn",
    "ro": "ron_Latn",
    "he": "heb_Hebr",
    "fa": "pes_Arab",
    "ur": "urd_Arab",
    "bn": "ben_Beng",
    "ta": "tam_Taml",
    "te": "tel_Telu",
    "mr": "mar_Deva",
    "gu": "guj_Gujr",
    "kn": "kan_Knda",
    "ml": "mal_Mlym",
    "pa": "pan_Guru",
    "ne": "nep_Deva",
    "si": "sin_Sinh",
    "my": "mya_Mymr",
    "km": "khm_Khmr",
    "lo": "lao_Laoo",
    "ms": "zsm_Latn",
    "sw": "swh_Latn",
    "af": "afr_Latn",
    "zu": "zul_Latn",
    "xh": "xho_Latn",
    "am": "amh_Ethi",
    "ha": "hau_Latn",
    "yo": "yor_Latn",
    "ig": "ibo_Latn",
}

_OPUS_MT_ENGLISH_PAIRS: Final[tuple[str, ...]] = (
    "de", "fr", "es", "it", "pt", "ru", "zh", "ja", "ar", "hi", "nl", "sv",
    "fi", "pl", "tr", "vi", "th", "ko", "he", "cs", "hu", "ro", "bg", "uk",
    "sk", "sl", "hr", "et", "lv", "lt", "mt", "ga", "cy", "is", "mk", "sr",
    "bs", "sq", "be", "ka", "hy", "az", "kk", "ky", "uz", "mn", "bn", "ta",
    "te", "mr", "gu", "kn", "ml", "pa", "ne", "si", "my", "km", "lo", "ms",
    "sw", "af", "zu", "xh", "am", "ha", "yo", "ig", "ur", "yi", "sd", "ug",
    "ku", "or", "as",
)  # fmt: skip

# Helsinki-NLP names Japanese "jap".
_OPUS_MT_MODEL_CODES: Final[dict[str, str]] = {"ja": "jap"}


def _opus_mt_model(src: str, tgt: str) -> str:
    src_code: str = _OPUS_MT_MODEL_CODES.get(src, src)
    tgt_code: str = _OPUS_MT_MODEL_CODES.get(tgt, tgt)
    return f"Helsinki-NLP/opus-mt-{src_code}-{tgt_code}"


# (src, tgt) -> model id; every model pairs English with one other language.
OPUS_MT_MODELS: Final[dict[tuple[str, str], str]] = {
    pair: _opus_mt_model(*pair)
    for lang in _OPUS_MT_ENGLISH_PAIRS
    for pair in (("en", lang), (lang, "en"))
}

M2M100_MODEL_ID: Final[str] = "facebook/m2m100_418M"

M2M100_LANGUAGES: Final[frozenset[str]] = frozenset(
    (
        "en", "es", "fr", "de", "it", "pt", "ru", "ja", "zh", "pl", "nl", "sv",
        "da", "no", "fi", "el", "cs", "hu", "ro", "sk", "sl", "bg", "hr", "et",
        "lv", "lt", "uk", "tr", "id", "ko", "ar", "he", "fa", "hi", "bn", "ta",
        "te", "mr", "gu", "kn", "ml", "pa", "th", "vi", "ms", "sw", "af", "zu",
        "xh", "am", "ha", "yo", "ig", "ur", "yi", "sd", "ug", "ku", "or", "as",
        "ne", "si", "my", "km", "lo", "tl", "jv", "su", "ceb", "ga", "cy", "gd",
        "is", "mt", "mk", "sr", "bs", "sq", "be", "ka", "hy", "az", "kk", "ky",
        "uz", "mn", "rw", "rn", "ny", "sn", "st", "tn", "ve", "ts", "ss", "nso",
        "lg", "ak", "wo", "ff", "bm", "dyu", "fon", "ewe", "tw", "kik", "kam",
        "luy", "mer", "so", "om", "kln", "luo", "ti", "bo", "dz", "new", "mai",
        "bho", "mag", "hne", "sat", "kok", "doi", "mni", "ks", "ban", "bug", "min",
        "ace", "bjn", "mad", "bbc", "btx", "bts", "pam", "pag", "war", "ilo", "bcl",
    )
)  # fmt: skip
