from __future__ import annotations

from typing import ClassVar

from core.trans.engines.hf_inference import HFInferenceTranslation

__all__: list[str] = ["M2M100Translation"]


class M2M100Translation(HFInferenceTranslation):
    """M2M-100 many-to-many model; translates directly between any two of its languages."""

    DISPLAY_NAME: ClassVar[str] = "M2M-100"

    @staticmethod
    def fetch_engine_name() -> str:
        return "m2m100"
