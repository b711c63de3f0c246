"""Percentage and ranking helpers shared by the attribute mergers."""

from __future__ import annotations

import dataclasses as dc
import math
import typing as typ

from stylefusion.fusion.adapters._coercion import coerce_terms
from stylefusion.fusion.domain import Contribution

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import WeightedSource

#: Decimal places kept when comparing accumulated float scores.
SCORE_PRECISION = 12


def percentage(share: float) -> int:
    """Convert a share in [0, 1] to an integer percent, rounding halves up."""
    return max(0, min(100, math.floor(share * 100 + 0.5)))


def share_contributions(
    weights: cabc.Sequence[tuple[str, float]],
) -> tuple[Contribution, ...]:
    """Express each ``(source_type, weight)`` pair as a share of their total.

    When the total is not positive every entry receives an equal share.
    """
    if not weights:
        return ()
    total = sum(weight for _, weight in weights)
    if total <= 0.0:
        equal = percentage(1.0 / len(weights))
        return tuple(Contribution(source_type, equal) for source_type, _ in weights)
    return tuple(
        Contribution(source_type, percentage(weight / total))
        for source_type, weight in weights
    )


def rank_by_score(scores: cabc.Mapping[str, float]) -> list[str]:
    """Order terms by descending score, keeping first-seen order for ties.

    Scores are compared at a fixed precision so sums accumulated in a
    different order still tie.
    """
    return sorted(scores, key=lambda term: -round(scores[term], SCORE_PRECISION))


@dc.dataclass(slots=True)
class TermTally:
    """Accumulated weight and membership for one term across a batch.

    Attributes
    ----------
    score : float
        Sum of normalised weights of the sources listing the term.
    members : list[int]
        Indexes of those sources, in input order.
    """

    score: float = 0.0
    members: list[int] = dc.field(default_factory=list)

    @property
    def count(self) -> int:
        """Return how many sources list the term."""
        return len(self.members)


def tally_terms(
    sources: cabc.Sequence[WeightedSource],
    attribute: str,
    *,
    exclude: cabc.Callable[[str], bool] | None = None,
) -> dict[str, TermTally]:
    """Accumulate per-term weight across ``sources`` in first-seen order.

    Terms are matched byte for byte and each source counts once per term.
    """
    tallies: dict[str, TermTally] = {}
    for index, source in enumerate(sources):
        for term in coerce_terms(getattr(source.assessment, attribute)) or ():
            if exclude is not None and exclude(term):
                continue
            tally = tallies.setdefault(term, TermTally())
            tally.score += source.normalised_weight
            tally.members.append(index)
    return tallies


def term_contributions(
    sources: cabc.Sequence[WeightedSource],
    tally: TermTally,
) -> tuple[Contribution, ...]:
    """Return each member's share of one term's score."""
    return share_contributions(
        [
            (sources[index].source_type, sources[index].normalised_weight)
            for index in tally.members
        ]
    )


def selection_contributions(
    sources: cabc.Sequence[WeightedSource],
    tallies: cabc.Mapping[str, TermTally],
    selected: cabc.Sequence[str],
) -> tuple[Contribution, ...]:
    """Return each source's share of the summed scores of ``selected`` terms."""
    per_source: dict[int, float] = {}
    for term in selected:
        for index in tallies[term].members:
            per_source[index] = (
                per_source.get(index, 0.0) + sources[index].normalised_weight
            )
    return share_contributions(
        [(sources[index].source_type, per_source[index]) for index in sorted(per_source)]
    )
