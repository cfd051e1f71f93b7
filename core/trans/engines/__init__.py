"""Translation provider implementations.

This package contains the concrete implementations of the TransInterface for each backend.
Importing it registers every provider class in ``TransInterface.registered``.

Modules:
- LibreTranslateTranslation: self-hosted LibreTranslate server (native batch).
- NLLBTranslation, OpusMTTranslation, M2M100Translation: hosted inference API models.
- DeeplTranslation: DeepL API.
"""

from core.trans.engines.hf_inference import HFInferenceTranslation
from core.trans.engines.trans_deepl import DeeplTranslation
from core.trans.engines.trans_libretranslate import LibreTranslateTranslation
from core.trans.engines.trans_m2m100 import M2M100Translation
from core.trans.engines.trans_nllb import NLLBTranslation
from core.trans.engines.trans_opus_mt import OpusMTTranslation

__all__: list[str] = [
    "DeeplTranslation",
    "HFInferenceTranslation",
    "LibreTranslateTranslation",
    "M2M100Translation",
    "NLLBTranslation",
    "OpusMTTranslation",
]
