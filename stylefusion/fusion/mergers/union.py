"""Weighted union for vocabulary.

Every term listed by any source is scored with the summed normalised weight
of the sources listing it. The highest-scoring terms are kept, so a term
shared by several light sources can outrank one listed only by a heavy
source.
"""

from __future__ import annotations

import typing as typ

from stylefusion.fusion.domain import MergedAttribute
from stylefusion.fusion.settings import DEFAULT_SETTINGS

from ._shares import (
    rank_by_score,
    selection_contributions,
    tally_terms,
    term_contributions,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import WeightedSource
    from stylefusion.fusion.settings import FusionSettings


class WeightedUnionMerger:
    """Merge a term list by summed source weight.

    Parameters
    ----------
    attribute : str, optional
        Assessment field to read; ``"vocabulary"`` by default.
    settings : FusionSettings, optional
        Supplies the maximum number of terms returned.
    """

    def __init__(
        self,
        attribute: str = "vocabulary",
        *,
        settings: FusionSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.attribute = attribute
        self._limit = settings.vocabulary_limit

    def merge(
        self, sources: cabc.Sequence[WeightedSource]
    ) -> MergedAttribute[tuple[str, ...]]:
        """Return the top-scoring terms with per-term attribution.

        Batches with fewer distinct terms than the limit return them all,
        without padding.
        """
        tallies = tally_terms(sources, self.attribute)
        ranked = rank_by_score({term: tally.score for term, tally in tallies.items()})
        selected = tuple(ranked[: self._limit])
        return MergedAttribute(
            value=selected,
            contributions=selection_contributions(sources, tallies, selected),
            term_contributions={
                term: term_contributions(sources, tallies[term]) for term in selected
            },
            details={
                "term_scores": {term: round(tallies[term].score, 2) for term in selected},
            },
        )
