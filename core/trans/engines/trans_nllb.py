from __future__ import annotations

from typing import ClassVar

from core.trans.engines.hf_inference import HFInferenceTranslation

__all__: list[str] = ["NLLBTranslation"]


class NLLBTranslation(HFInferenceTranslation):
    """NLLB-200 (No Language Left Behind); languages are addressed by language + script tags such as ``eng_Latn``."""

    DISPLAY_NAME: ClassVar[str] = "NLLB"

    @staticmethod
    def fetch_engine_name() -> str:
        return "nllb"
