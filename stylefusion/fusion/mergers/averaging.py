"""Weighted numeric averaging for formality.

Formality is ordinal, so instead of voting the merger maps each category to a
score (casual 0, balanced 1, formal 2), takes the weighted mean, and maps the
mean back to a category. A batch split between casual and formal therefore
lands on balanced rather than on whichever side is marginally heavier.
"""

from __future__ import annotations

import types
import typing as typ

from stylefusion.fusion.adapters._coercion import coerce_category
from stylefusion.fusion.domain import (
    DEFAULT_FORMALITY,
    Contribution,
    Formality,
    MergedAttribute,
)

from ._shares import percentage
from .voting import coercion_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import WeightedSource

FORMALITY_SCORES: cabc.Mapping[Formality, int] = types.MappingProxyType({
    Formality.CASUAL: 0,
    Formality.BALANCED: 1,
    Formality.FORMAL: 2,
})
_CASUAL_UPPER_BOUND = 0.5
_BALANCED_UPPER_BOUND = 1.5


def formality_from_score(score: float) -> Formality:
    """Map a mean score back to a category.

    ``< 0.5`` is casual, ``[0.5, 1.5]`` is balanced, ``> 1.5`` is formal.
    """
    if score < _CASUAL_UPPER_BOUND:
        return Formality.CASUAL
    if score <= _BALANCED_UPPER_BOUND:
        return Formality.BALANCED
    return Formality.FORMAL


class FormalityAveragingMerger:
    """Merge formality by weighted mean of ordinal scores."""

    attribute = "formality"

    def merge(
        self, sources: cabc.Sequence[WeightedSource]
    ) -> MergedAttribute[Formality]:
        """Return the category of the weighted mean score.

        Every source contributes its normalised weight as a percentage,
        whichever category it reported, because averaging blends values.
        """
        if not sources:
            return MergedAttribute(value=DEFAULT_FORMALITY, contributions=())

        warnings: list[str] = []
        weighted_sum = 0.0
        total_weight = 0.0
        for source in sources:
            raw_value = source.assessment.formality
            value, substituted = coerce_category(raw_value, Formality, DEFAULT_FORMALITY)
            if substituted:
                warnings.append(
                    coercion_warning(
                        self.attribute, raw_value, source.source_type, DEFAULT_FORMALITY
                    )
                )
            weighted_sum += FORMALITY_SCORES[value] * source.normalised_weight
            total_weight += source.normalised_weight

        average = weighted_sum / total_weight if total_weight > 0.0 else 1.0
        contributions = tuple(
            Contribution(source.source_type, percentage(source.normalised_weight))
            for source in sources
        )
        return MergedAttribute(
            value=formality_from_score(average),
            contributions=contributions,
            warnings=tuple(warnings),
            details={"average_score": round(average, 2)},
        )