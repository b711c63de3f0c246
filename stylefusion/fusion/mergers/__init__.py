"""Attribute mergers for the fusion engine.

One merger per style attribute: weighted voting for tone and sentence
length, weighted averaging for formality, weighted union for vocabulary and
weighted intersection for avoidance.
"""

from __future__ import annotations

import typing as typ

from stylefusion.fusion.settings import DEFAULT_SETTINGS

from .averaging import FORMALITY_SCORES, FormalityAveragingMerger, formality_from_score
from .intersection import WeightedIntersectionMerger
from .union import WeightedUnionMerger
from .voting import CategoricalVotingMerger, sentence_length_merger, tone_merger

if typ.TYPE_CHECKING:
    from stylefusion.fusion.ports import AttributeMerger
    from stylefusion.fusion.settings import FusionSettings


def default_mergers(
    settings: FusionSettings = DEFAULT_SETTINGS,
) -> tuple[AttributeMerger, ...]:
    """Build the five attribute mergers in merge order."""
    return (
        tone_merger(),
        FormalityAveragingMerger(),
        sentence_length_merger(),
        WeightedUnionMerger(settings=settings),
        WeightedIntersectionMerger(settings=settings),
    )


__all__ = (
    "FORMALITY_SCORES",
    "CategoricalVotingMerger",
    "FormalityAveragingMerger",
    "WeightedIntersectionMerger",
    "WeightedUnionMerger",
    "default_mergers",
    "formality_from_score",
    "sentence_length_merger",
    "tone_merger",
)
