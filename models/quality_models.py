"""Models for translation quality scores."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = ["QualityMetrics", "QualityScore", "ScoredCandidate"]


@dataclass(frozen=True)
class QualityMetrics:
    """Sub-scores in [0, 1] that make up the overall quality score."""

    length_ratio: float
    encoding: float
    script_consistency: float
    language_match: float
    confidence: float


@dataclass(frozen=True)
class QualityScore:
    """Overall quality verdict for a single candidate.

    Attributes:
        score (float): Weighted overall score in [0, 1].
        metrics (QualityMetrics): Individual sub-scores.
        passes (bool): Whether ``score`` reached the threshold it was evaluated against.
        issues (tuple[str, ...]): Human-readable notes for weak sub-scores.
    """

    score: float
    metrics: QualityMetrics
    passes: bool
    issues: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScoredCandidate:
    text: str
    provider: str
    score: QualityScore
