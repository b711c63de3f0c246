"""Source weighting and weight normalisation.

A source's raw weight is its quality weight (by source type) multiplied by a
quantity factor (by word-count bucket). Raw weights are then rescaled so the
batch sums to 1.0, and the same normalised snapshot feeds every merger.

Examples
--------
Weight and normalise a batch synchronously:

>>> weighted = weigh_sources(assessments)
>>> round(sum(source.normalised_weight for source in weighted), 6)
1.0
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from stylefusion.fusion.adapters._coercion import coerce_word_count
from stylefusion.fusion.domain import WeightedSource
from stylefusion.fusion.settings import DEFAULT_SETTINGS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import SourceAssessment
    from stylefusion.fusion.settings import FusionSettings

#: Word count assumed when a source does not report one.
ASSUMED_WORD_COUNT = 500
#: Word count assumed when a source reports exactly zero words.
ZERO_WORD_COUNT_SUBSTITUTE = 100

_SMALL_SAMPLE_LIMIT = 500
_LARGE_SAMPLE_LIMIT = 1500
_SMALL_SAMPLE_FACTOR = 0.5
_STANDARD_SAMPLE_FACTOR = 1.0
_LARGE_SAMPLE_FACTOR = 1.5


def effective_word_count(word_count: object) -> int:
    """Return the word count used for weighting.

    Unknown counts become 500 and a count of exactly zero becomes 100, so
    neither can zero out a source's weight.
    """
    known = coerce_word_count(word_count)
    if known is None:
        return ASSUMED_WORD_COUNT
    if known == 0:
        return ZERO_WORD_COUNT_SUBSTITUTE
    return known


def quantity_factor(word_count: object) -> float:
    """Return the quantity factor for a reported word count.

    ``< 500`` gives 0.5, ``500..1500`` gives 1.0, and anything larger gives
    1.5.
    """
    words = effective_word_count(word_count)
    if words < _SMALL_SAMPLE_LIMIT:
        return _SMALL_SAMPLE_FACTOR
    if words <= _LARGE_SAMPLE_LIMIT:
        return _STANDARD_SAMPLE_FACTOR
    return _LARGE_SAMPLE_FACTOR


def weigh_source(
    assessment: SourceAssessment,
    settings: FusionSettings = DEFAULT_SETTINGS,
) -> WeightedSource:
    """Compute the raw weight for one assessment.

    Parameters
    ----------
    assessment : SourceAssessment
        Validated assessment to weigh.
    settings : FusionSettings, optional
        Quality-weight table to use.

    Returns
    -------
    WeightedSource
        The assessment with quality weight, quantity factor, and raw weight.
        ``normalised_weight`` is left at 0.0.
    """
    quality = settings.quality_weight_for(assessment.source_type)
    factor = quantity_factor(assessment.word_count)
    return WeightedSource(
        assessment=assessment,
        quality_weight=quality,
        quantity_factor=factor,
        raw_weight=quality * factor,
    )


def normalise_weights(raw_weights: cabc.Sequence[float]) -> list[float]:
    """Rescale ``raw_weights`` so they sum to 1.0.

    A zero (or negative) total falls back to an equal split, and a single
    weight always normalises to exactly 1.0.

    Parameters
    ----------
    raw_weights : Sequence[float]
        Non-negative raw weights.

    Returns
    -------
    list[float]
        Normalised weights of the same length; empty for empty input.
    """
    count = len(raw_weights)
    if count == 0:
        return []
    if count == 1:
        return [1.0]
    total = sum(raw_weights)
    if total <= 0.0:
        return [1.0 / count] * count
    return [weight / total for weight in raw_weights]


def apply_normalisation(weighted: cabc.Sequence[WeightedSource]) -> list[WeightedSource]:
    """Return copies of ``weighted`` carrying their normalised weights."""
    normalised = normalise_weights([source.raw_weight for source in weighted])
    return [
        dc.replace(source, normalised_weight=weight)
        for source, weight in zip(weighted, normalised, strict=True)
    ]


def weigh_sources(
    assessments: cabc.Sequence[SourceAssessment],
    settings: FusionSettings = DEFAULT_SETTINGS,
) -> list[WeightedSource]:
    """Weigh and normalise a batch in one pass."""
    return apply_normalisation([weigh_source(item, settings) for item in assessments])


class SourceTypeWeightingStrategy:
    """Weighting strategy keyed on source type and word count.

    Parameters
    ----------
    settings : FusionSettings, optional
        Quality-weight table; defaults to the documented weights.
    """

    def __init__(self, *, settings: FusionSettings = DEFAULT_SETTINGS) -> None:
        self._settings = settings

    async def compute_weights(
        self,
        assessments: cabc.Sequence[SourceAssessment],
    ) -> list[WeightedSource]:
        """Weigh and normalise ``assessments``.

        Parameters
        ----------
        assessments : Sequence[SourceAssessment]
            Validated assessments.

        Returns
        -------
        list[WeightedSource]
            One weighted source per assessment, in input order, with
            normalised weights summing to 1.0.
        """
        return weigh_sources(assessments, self._settings)
