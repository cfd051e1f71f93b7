"""Heuristic translation quality scoring.

Scores a candidate translation without any reference translation, using five cheap signals:
length ratio against the source, text encoding sanity, how much of the text is written in the
target language's script, whether the text plausibly belongs to the target language, and a
confidence signal that penalises echoes of the source, error messages and repetition.

All functions here are pure: equal inputs always yield equal scores and nothing is raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from core.language.validator import LanguageValidator
from core.quality.scripts import SCRIPT_RANGES, count_in_script
from models.quality_models import QualityMetrics, QualityScore, ScoredCandidate
from models.re_models import ERROR_PREFIX_PATTERN, RTL_CHARACTER_PATTERN

if TYPE_CHECKING:
    from collections.abc import Iterable

    from models.language_models import LanguageInfo

__all__: list[str] = ["DEFAULT_QUALITY_THRESHOLD", "QualityScorer"]

DEFAULT_QUALITY_THRESHOLD: Final[float] = 0.5

MIN_LENGTH_RATIO: Final[float] = 0.3
MAX_LENGTH_RATIO: Final[float] = 3.0
NEUTRAL_SCORE: Final[float] = 0.8
REPLACEMENT_CHARACTER: Final[str] = "\ufffd"


class QualityScorer:
    """Stateless quality scorer.

    Attributes:
        WEIGHTS (ClassVar[dict[str, float]]): Weight of each sub-score in the overall score.
        ISSUE_CUTOFFS (ClassVar[tuple[tuple[str, float, str], ...]]):
            (sub-score name, cutoff, message) triples; a sub-score below its cutoff adds the message.
    """

    WEIGHTS: ClassVar[dict[str, float]] = {
        "length_ratio": 0.15,
        "encoding": 0.20,
        "script_consistency": 0.25,
        "language_match": 0.25,
        "confidence": 0.15,
    }

    ISSUE_CUTOFFS: ClassVar[tuple[tuple[str, float, str], ...]] = (
        ("length_ratio", 0.5, "Length ratio is unusual"),
        ("encoding", 0.8, "Character encoding issues detected"),
        ("script_consistency", 0.6, "Script consistency is low"),
        ("language_match", 0.6, "Language match is uncertain"),
        ("confidence", 0.6, "Confidence is low"),
    )

    @staticmethod
    def length_ratio_score(source: str, candidate: str) -> float:
        if not source:
            return 1.0 if not candidate else 0.0

        ratio: float = len(candidate) / len(source)
        if ratio < MIN_LENGTH_RATIO:
            return ratio / MIN_LENGTH_RATIO
        if ratio > MAX_LENGTH_RATIO:
            return max(0.0, 1.0 - (ratio - MAX_LENGTH_RATIO) / MAX_LENGTH_RATIO)
        return 1.0

    @staticmethod
    def encoding_score(candidate: str) -> float:
        if not candidate:
            return 0.0
        try:
            candidate.encode("utf-8", errors="strict")
        except UnicodeEncodeError:
            # Lone surrogates cannot be represented in UTF-8.
            return 0.0
        if REPLACEMENT_CHARACTER in candidate:
            return 0.5
        return 1.0

    @staticmethod
    def script_consistency_score(candidate: str, tgt_lang: str) -> float:
        info: LanguageInfo | None = LanguageValidator.get_language_info(LanguageValidator.normalize_code(tgt_lang))
        if info is None:
            return NEUTRAL_SCORE
        ranges = SCRIPT_RANGES.get(info.script)
        if ranges is None:
            return NEUTRAL_SCORE
        if not candidate:
            return 0.0

        ratio: float = count_in_script(candidate, ranges) / len(candidate)
        if ratio >= 0.8:
            return 1.0
        if ratio >= 0.5:
            return 0.7
        if ratio >= 0.3:
            return 0.4
        return 0.1

    @classmethod
    def language_match_score(cls, candidate: str, tgt_lang: str) -> float:
        info: LanguageInfo | None = LanguageValidator.get_language_info(LanguageValidator.normalize_code(tgt_lang))
        if info is None:
            return NEUTRAL_SCORE
        if info.rtl and not RTL_CHARACTER_PATTERN.search(candidate) and len(candidate) > 10:
            return 0.3
        return cls.script_consistency_score(candidate, tgt_lang) * 0.9

    @staticmethod
    def confidence_score(source: str, candidate: str) -> float:
        if not candidate or not candidate.strip():
            return 0.0

        score: float = 1.0
        if candidate == source and len(source) > 5:
            score *= 0.3
        if ERROR_PREFIX_PATTERN.match(candidate):
            score *= 0.2
        if len(candidate) > 20:
            words: list[str] = candidate.split()
            if words and len(set(words)) / len(words) < 0.3:
                score *= 0.5
        return min(1.0, max(0.0, score))

    @classmethod
    def evaluate(
        cls,
        source: str,
        candidate: str,
        src_lang: str,
        tgt_lang: str,
        threshold: float = DEFAULT_QUALITY_THRESHOLD,
    ) -> QualityScore:
        """Score a candidate translation.

        Args:
            source (str): Source text that was translated.
            candidate (str): Candidate translation.
            src_lang (str): Source language code. Kept for symmetry with callers; no sub-score uses it.
            tgt_lang (str): Target language code.
            threshold (float): Minimum overall score for ``passes``.

        Returns:
            QualityScore: Overall score, sub-scores, pass flag and issues.
        """
        _ = src_lang
        metrics = QualityMetrics(
            length_ratio=cls.length_ratio_score(source, candidate),
            encoding=cls.encoding_score(candidate),
            script_consistency=cls.script_consistency_score(candidate, tgt_lang),
            language_match=cls.language_match_score(candidate, tgt_lang),
            confidence=cls.confidence_score(source, candidate),
        )
        overall: float = sum(getattr(metrics, name) * weight for name, weight in cls.WEIGHTS.items())
        overall = min(1.0, max(0.0, overall))
        issues: tuple[str, ...] = tuple(
            message for name, cutoff, message in cls.ISSUE_CUTOFFS if getattr(metrics, name) < cutoff
        )
        return QualityScore(score=overall, metrics=metrics, passes=overall >= threshold, issues=issues)

    @classmethod
    def is_quality_acceptable(
        cls,
        source: str,
        candidate: str,
        src_lang: str,
        tgt_lang: str,
        threshold: float = DEFAULT_QUALITY_THRESHOLD,
    ) -> bool:
        return cls.evaluate(source, candidate, src_lang, tgt_lang, threshold).passes

    @classmethod
    def select_best_translation(
        cls,
        candidates: Iterable[tuple[str, str]],
        source: str,
        src_lang: str,
        tgt_lang: str,
        threshold: float = DEFAULT_QUALITY_THRESHOLD,
    ) -> ScoredCandidate | None:
        """Pick the highest-scoring candidate.

        Candidates are (text, provider) pairs in priority order. Only a strictly higher score
        displaces the current best, so ties keep the earlier candidate.

        Returns:
            ScoredCandidate | None: The best candidate, or None when there are no candidates.
        """
        best: ScoredCandidate | None = None
        for text, provider in candidates:
            scored = ScoredCandidate(
                text=text,
                provider=provider,
                score=cls.evaluate(source, text, src_lang, tgt_lang, threshold),
            )
            if best is None or scored.score.score > best.score.score:
                best = scored
        return best
