from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from core.trans.engines.hf_inference import HFInferenceTranslation

if TYPE_CHECKING:
    from core.trans.registry import BackendDescriptor

__all__: list[str] = ["OpusMTTranslation"]


class OpusMTTranslation(HFInferenceTranslation):
    """OPUS-MT: one specialised model per language pair, so the request body carries no language parameters."""

    DISPLAY_NAME: ClassVar[str] = "OPUS-MT"

    @staticmethod
    def fetch_engine_name() -> str:
        return "opus_mt"

    def build_payload(self, content: str, descriptor: BackendDescriptor) -> dict[str, Any]:
        _ = descriptor
        return {"inputs": content}
