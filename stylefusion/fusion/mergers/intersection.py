"""Weighted intersection for avoidance.

Avoidance is conservative: a term is only kept when enough of the batch
agrees the author avoids it. Terms listed by at least half of the sources
win outright; failing that, terms whose summed weight clears a threshold
are kept; failing both, the merged avoidance is the ``"none"`` sentinel.
"""

from __future__ import annotations

import typing as typ

from stylefusion.fusion.adapters._coercion import coerce_terms
from stylefusion.fusion.domain import AVOIDANCE_NONE, MergedAttribute
from stylefusion.fusion.settings import DEFAULT_SETTINGS

from ._shares import (
    rank_by_score,
    selection_contributions,
    share_contributions,
    tally_terms,
    term_contributions,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import Contribution, WeightedSource
    from stylefusion.fusion.settings import FusionSettings

    from ._shares import TermTally

STRATEGY_INTERSECTION = "intersection"
STRATEGY_WEIGHTED = "weighted"
STRATEGY_NONE = "none"


def is_sentinel(term: str) -> bool:
    """Return True when ``term`` spells the ``"none"`` sentinel."""
    return term.strip().lower() == AVOIDANCE_NONE


class WeightedIntersectionMerger:
    """Merge avoidance terms by agreement across sources.

    Parameters
    ----------
    attribute : str, optional
        Assessment field to read; ``"avoidance"`` by default.
    settings : FusionSettings, optional
        Supplies the result cap and both thresholds.
    """

    def __init__(
        self,
        attribute: str = "avoidance",
        *,
        settings: FusionSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.attribute = attribute
        self._limit = settings.avoidance_limit
        self._appearance_threshold = settings.avoidance_appearance_threshold
        self._weight_threshold = settings.avoidance_weight_threshold

    def merge(
        self, sources: cabc.Sequence[WeightedSource]
    ) -> MergedAttribute[tuple[str, ...]]:
        """Return up to ``avoidance_limit`` agreed terms, or ``("none",)``."""
        tallies = tally_terms(sources, self.attribute, exclude=is_sentinel)
        source_count = len(sources)
        details: dict[str, object] = {
            "term_stats": _term_stats(tallies, source_count),
        }

        strategy = STRATEGY_INTERSECTION
        candidates = [
            term
            for term, tally in tallies.items()
            if tally.count / source_count >= self._appearance_threshold
        ]
        if not candidates:
            strategy = STRATEGY_WEIGHTED
            candidates = [
                term
                for term, tally in tallies.items()
                if tally.score > self._weight_threshold
            ]
        if not candidates:
            details["strategy"] = STRATEGY_NONE
            contributions = _sentinel_contributions(sources, self.attribute)
            return MergedAttribute(
                value=(AVOIDANCE_NONE,),
                contributions=contributions,
                term_contributions=(
                    {AVOIDANCE_NONE: contributions} if contributions else {}
                ),
                details=details,
            )

        ranked = rank_by_score({term: tallies[term].score for term in candidates})
        selected = tuple(ranked[: self._limit])
        details["strategy"] = strategy
        return MergedAttribute(
            value=selected,
            contributions=selection_contributions(sources, tallies, selected),
            term_contributions={
                term: term_contributions(sources, tallies[term]) for term in selected
            },
            details=details,
        )


def _term_stats(
    tallies: cabc.Mapping[str, TermTally], source_count: int
) -> dict[str, dict[str, object]]:
    return {
        term: {
            "count": tally.count,
            "total_weight": round(tally.score, 2),
            "appearance_percentage": round(tally.count / source_count * 100, 1),
        }
        for term, tally in tallies.items()
    }


def _sentinel_contributions(
    sources: cabc.Sequence[WeightedSource], attribute: str
) -> tuple[Contribution, ...]:
    # Only sources that reported nothing but the sentinel back a "none" result.
    reporters = []
    for source in sources:
        terms = coerce_terms(getattr(source.assessment, attribute))
        if terms and all(is_sentinel(term) for term in terms):
            reporters.append((source.source_type, source.normalised_weight))
    return share_contributions(reporters)
