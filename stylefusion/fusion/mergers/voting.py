"""Weighted categorical voting for tone and sentence length.

Each source votes for one value with its normalised weight. The value with
the largest tally wins; exact ties go to the value backed by the single
highest-quality source, then to enum declaration order.

Examples
--------
Merge tone across a weighted batch:

>>> merged = tone_merger().merge(weighted_sources)
>>> merged.value
<Tone.CONVERSATIONAL: 'conversational'>
"""

from __future__ import annotations

import enum
import math
import typing as typ

from stylefusion.fusion.adapters._coercion import coerce_category
from stylefusion.fusion.domain import (
    DEFAULT_SENTENCE_LENGTH,
    DEFAULT_TONE,
    MergedAttribute,
    SentenceLength,
    Tone,
)
from stylefusion.logging import get_logger, log_warning

from ._shares import percentage, share_contributions

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylefusion.fusion.domain import WeightedSource

logger = get_logger(__name__)

#: Absolute tolerance under which two tallies count as tied.
TIE_TOLERANCE = 1e-12


def coercion_warning(
    attribute: str,
    raw_value: object,
    source_type: str,
    default: enum.StrEnum,
) -> str:
    """Describe and log the substitution of an unrecognised value."""
    message = (
        f"Unrecognised {attribute} value {raw_value!r} from {source_type!r} "
        f"source; using {default.value!r}."
    )
    log_warning(logger, message)
    return message


class CategoricalVotingMerger[E: enum.StrEnum]:
    """Weighted-vote merger over a closed categorical vocabulary.

    Parameters
    ----------
    attribute : str
        Assessment field to read.
    enum_type : type[E]
        The closed vocabulary.
    default : E
        Value substituted for unrecognised input and returned for an empty
        batch.
    """

    def __init__(self, attribute: str, enum_type: type[E], default: E) -> None:
        self.attribute = attribute
        self._enum_type = enum_type
        self._default = default

    def merge(self, sources: cabc.Sequence[WeightedSource]) -> MergedAttribute[E]:
        """Return the winning value and its contributors' shares of its tally."""
        tallies: dict[E, float] = dict.fromkeys(self._enum_type, 0.0)
        voters: dict[E, list[WeightedSource]] = {member: [] for member in self._enum_type}
        warnings: list[str] = []

        for source in sources:
            raw_value = getattr(source.assessment, self.attribute)
            value, substituted = coerce_category(
                raw_value, self._enum_type, self._default
            )
            if substituted:
                warnings.append(
                    coercion_warning(
                        self.attribute, raw_value, source.source_type, self._default
                    )
                )
            tallies[value] += source.normalised_weight
            voters[value].append(source)

        details: dict[str, object] = {
            "tallies": {member.value: round(tally, 4) for member, tally in tallies.items()},
        }
        candidates = [member for member in self._enum_type if voters[member]]
        if not candidates:
            return MergedAttribute(
                value=self._default,
                contributions=(),
                warnings=tuple(warnings),
                details=details,
            )

        winner = self._select_winner(candidates, tallies, voters)
        contributions = share_contributions(
            [(source.source_type, source.normalised_weight) for source in voters[winner]]
        )
        details["winning_share"] = percentage(tallies[winner])
        return MergedAttribute(
            value=winner,
            contributions=contributions,
            warnings=tuple(warnings),
            details=details,
        )

    @staticmethod
    def _select_winner(
        candidates: list[E],
        tallies: dict[E, float],
        voters: dict[E, list[WeightedSource]],
    ) -> E:
        best = max(tallies[member] for member in candidates)
        tied = [
            member
            for member in candidates
            if math.isclose(tallies[member], best, rel_tol=0.0, abs_tol=TIE_TOLERANCE)
        ]
        if len(tied) == 1:
            return tied[0]
        # max() keeps the first maximum, so enum order settles remaining ties.
        return max(
            tied,
            key=lambda member: max(source.quality_weight for source in voters[member]),
        )


def tone_merger() -> CategoricalVotingMerger[Tone]:
    """Build the voting merger for tone."""
    return CategoricalVotingMerger("tone", Tone, DEFAULT_TONE)


def sentence_length_merger() -> CategoricalVotingMerger[SentenceLength]:
    """Build the voting merger for sentence length."""
    return CategoricalVotingMerger(
        "sentence_length", SentenceLength, DEFAULT_SENTENCE_LENGTH
    )
