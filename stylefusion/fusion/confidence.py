"""Confidence scoring for a fused profile.

Confidence starts from a base derived from the total volume of text behind
the batch, is cut by quality penalties, then raised by small bonuses for
breadth of evidence. The result is clamped to ``[0.0, 0.95]``: the engine
never claims certainty.

Examples
--------
>>> round(base_confidence(1000), 2)
0.45
"""

from __future__ import annotations

import dataclasses as dc
import itertools
import typing as typ

from .adapters._coercion import coerce_word_count
from .settings import DEFAULT_SETTINGS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import QualitySignals, WeightedSource
    from .settings import FusionSettings

#: Confidence reported when no source survives validation.
EMPTY_BATCH_CONFIDENCE = 0.30
#: Ceiling applied after bonuses.
MAX_CONFIDENCE = 0.95

# (word volume, confidence) breakpoints; the base is linear between them.
_BASE_CURVE: tuple[tuple[int, float], ...] = (
    (100, 0.20),
    (500, 0.35),
    (1500, 0.55),
    (3000, 0.70),
    (5000, 0.80),
    (10000, 0.88),
    (20000, 0.92),
)

SPAM_PENALTY = 0.5
LOW_DIVERSITY_PENALTY = 0.7
MULTI_TYPE_BONUS = 0.03
MULTI_SOURCE_BONUS = 0.03
ADVANCED_ANALYSIS_BONUS = 0.02
MAX_BONUS = 0.08


@dc.dataclass(frozen=True, slots=True)
class ConfidenceBreakdown:
    """How a confidence value was reached.

    Attributes
    ----------
    base : float
        Volume-derived starting point.
    penalties : tuple[str, ...]
        Names of the penalties applied (``"spam"``, ``"low_diversity"``).
    bonus : float
        Total additive bonus after capping.
    value : float
        Final clamped and rounded confidence.
    """

    base: float
    penalties: tuple[str, ...]
    bonus: float
    value: float


def total_word_volume(sources: cabc.Sequence[WeightedSource]) -> int:
    """Sum the known word counts of ``sources``; unknown counts add nothing."""
    return sum(coerce_word_count(source.assessment.word_count) or 0 for source in sources)


def base_confidence(total_words: int) -> float:
    """Return the volume-derived base confidence.

    The curve is flat at 0.20 below 100 words, rises linearly between
    breakpoints, and is flat at 0.92 from 20,000 words.
    """
    first_words, first_value = _BASE_CURVE[0]
    if total_words <= first_words:
        return first_value
    for (low_words, low_value), (high_words, high_value) in itertools.pairwise(
        _BASE_CURVE
    ):
        if total_words <= high_words:
            span = (total_words - low_words) / (high_words - low_words)
            return low_value + span * (high_value - low_value)
    return _BASE_CURVE[-1][1]


def _has_spam(
    sources: cabc.Sequence[WeightedSource],
    signals: QualitySignals | None,
    settings: FusionSettings,
) -> bool:
    if signals is not None and signals.spam_detected:
        return True
    for source in sources:
        quality = source.assessment.quality
        ratio = quality.duplicate_sentence_ratio if quality is not None else None
        if ratio is not None and ratio >= settings.spam_duplicate_ratio:
            return True
    return False


def _has_low_diversity(
    sources: cabc.Sequence[WeightedSource], settings: FusionSettings
) -> bool:
    for source in sources:
        quality = source.assessment.quality
        diversity = quality.vocabulary_diversity if quality is not None else None
        if diversity is None:
            continue
        minimum = settings.minimum_diversity_for(
            coerce_word_count(source.assessment.word_count)
        )
        if diversity < minimum:
            return True
    return False


def _bonus(
    sources: cabc.Sequence[WeightedSource], signals: QualitySignals | None
) -> float:
    bonus = 0.0
    if len({source.source_type for source in sources}) >= 2:  # noqa: PLR2004
        bonus += MULTI_TYPE_BONUS
    if len(sources) >= 2:  # noqa: PLR2004
        bonus += MULTI_SOURCE_BONUS
    if signals is not None and signals.advanced_analysis_succeeded:
        bonus += ADVANCED_ANALYSIS_BONUS
    return min(bonus, MAX_BONUS)


def score_confidence(
    sources: cabc.Sequence[WeightedSource],
    signals: QualitySignals | None = None,
    settings: FusionSettings = DEFAULT_SETTINGS,
) -> ConfidenceBreakdown:
    """Score confidence for a weighted batch and explain the result.

    Parameters
    ----------
    sources : Sequence[WeightedSource]
        The batch that fed the mergers.
    signals : QualitySignals | None, optional
        Batch-level collaborator flags.
    settings : FusionSettings, optional
        Penalty thresholds.

    Returns
    -------
    ConfidenceBreakdown
        Base, applied penalties, bonus, and the final value.
    """
    if not sources:
        return ConfidenceBreakdown(
            base=EMPTY_BATCH_CONFIDENCE,
            penalties=(),
            bonus=0.0,
            value=EMPTY_BATCH_CONFIDENCE,
        )

    base = base_confidence(total_word_volume(sources))
    value = base
    penalties: list[str] = []
    if _has_spam(sources, signals, settings):
        value *= SPAM_PENALTY
        penalties.append("spam")
    if _has_low_diversity(sources, settings):
        value *= LOW_DIVERSITY_PENALTY
        penalties.append("low_diversity")
    bonus = _bonus(sources, signals)
    value = min(MAX_CONFIDENCE, max(0.0, value + bonus))
    return ConfidenceBreakdown(
        base=round(base, 4),
        penalties=tuple(penalties),
        bonus=round(bonus, 2),
        value=round(value, 2),
    )


def calculate_confidence(
    sources: cabc.Sequence[WeightedSource],
    signals: QualitySignals | None = None,
    settings: FusionSettings = DEFAULT_SETTINGS,
) -> float:
    """Return the confidence for a weighted batch, in ``[0.0, 0.95]``."""
    return score_confidence(sources, signals, settings).value
