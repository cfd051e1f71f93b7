"""Heuristic translation quality scoring."""

from core.quality.scorer import DEFAULT_QUALITY_THRESHOLD, QualityScorer

__all__: list[str] = ["DEFAULT_QUALITY_THRESHOLD", "QualityScorer"]
