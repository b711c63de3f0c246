"""Tunable parameters for the fusion engine.

Defaults reproduce the documented weighting and merging rules. A
configuration mapping can override them; malformed entries fall back to the
defaults rather than failing.

Examples
--------
Raise the weight of repository sources and return five vocabulary terms:

>>> settings = settings_from_mapping({
...     "weighting": {"quality_weights": {"repository": 0.8}},
...     "merging": {"vocabulary_limit": 5},
... })
>>> settings.quality_weight_for("repository")
0.8
"""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ

from .adapters._coercion import coerce_float, coerce_int
from .domain import SourceType

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import JsonMapping

#: Quality weight per source type, highest to lowest.
DEFAULT_QUALITY_WEIGHTS: cabc.Mapping[str, float] = types.MappingProxyType({
    SourceType.CORRESPONDENCE: 1.0,
    SourceType.EXISTING_PROFILE: 0.9,
    SourceType.FREE_TEXT: 0.85,
    SourceType.REPOSITORY: 0.7,
    SourceType.ARTICLE: 0.65,
})
DEFAULT_FALLBACK_QUALITY_WEIGHT = 0.5


@dc.dataclass(frozen=True, slots=True)
class FusionSettings:
    """Every tunable used by the weighting, merging, and scoring stages.

    Attributes
    ----------
    quality_weights : Mapping[str, float]
        Quality weight per source type.
    fallback_quality_weight : float
        Quality weight for unrecognised source types.
    vocabulary_limit : int
        Maximum number of merged vocabulary terms.
    avoidance_limit : int
        Maximum number of merged avoidance terms.
    avoidance_appearance_threshold : float
        Minimum fraction of sources that must list an avoidance term.
    avoidance_weight_threshold : float
        Total weight an avoidance term must exceed in the fallback pass.
    spam_duplicate_ratio : float
        Duplicate-sentence ratio at or above which a source counts as spam.
    minimum_vocabulary_diversity : float
        Diversity below which a long source is penalised.
    diversity_word_floor : int
        Word count a source must exceed before diversity is checked.
    """

    quality_weights: cabc.Mapping[str, float] = DEFAULT_QUALITY_WEIGHTS
    fallback_quality_weight: float = DEFAULT_FALLBACK_QUALITY_WEIGHT
    vocabulary_limit: int = 4
    avoidance_limit: int = 3
    avoidance_appearance_threshold: float = 0.5
    avoidance_weight_threshold: float = 0.6
    spam_duplicate_ratio: float = 0.7
    minimum_vocabulary_diversity: float = 0.15
    diversity_word_floor: int = 500

    def quality_weight_for(self, source_type: str) -> float:
        """Return the quality weight for ``source_type``, never failing."""
        return self.quality_weights.get(source_type, self.fallback_quality_weight)

    def minimum_diversity_for(self, word_count: int | None) -> float:
        """Return the minimum acceptable vocabulary diversity for a source.

        Short or unsized sources are exempt, so their minimum is 0.0.
        """
        if word_count is None or word_count <= self.diversity_word_floor:
            return 0.0
        return self.minimum_vocabulary_diversity


DEFAULT_SETTINGS = FusionSettings()


def _section(configuration: JsonMapping, key: str) -> dict[str, object]:
    section = configuration.get(key)
    if not isinstance(section, dict):
        return {}
    return typ.cast("dict[str, object]", section)


def _quality_weights(weighting: dict[str, object]) -> cabc.Mapping[str, float]:
    overrides = weighting.get("quality_weights")
    if not isinstance(overrides, dict):
        return DEFAULT_QUALITY_WEIGHTS
    merged = dict(DEFAULT_QUALITY_WEIGHTS)
    for source_type, raw_weight in typ.cast("dict[object, object]", overrides).items():
        if not isinstance(source_type, str):
            continue
        weight = coerce_float(raw_weight, merged.get(source_type, -1.0))
        if weight >= 0.0:
            merged[source_type] = weight
    return types.MappingProxyType(merged)


def settings_from_mapping(configuration: JsonMapping | None) -> FusionSettings:
    """Build settings from a configuration mapping.

    The mapping may contain a ``"weighting"`` section (``quality_weights``,
    ``fallback_quality_weight``) and a ``"merging"`` section (limits and
    thresholds named after the ``FusionSettings`` attributes). Missing or
    malformed values keep their defaults.

    Parameters
    ----------
    configuration : JsonMapping | None
        Caller-supplied configuration.

    Returns
    -------
    FusionSettings
        Settings with overrides applied.
    """
    if not configuration:
        return DEFAULT_SETTINGS
    weighting = _section(configuration, "weighting")
    merging = _section(configuration, "merging")
    base = DEFAULT_SETTINGS
    return FusionSettings(
        quality_weights=_quality_weights(weighting),
        fallback_quality_weight=max(
            0.0,
            coerce_float(
                weighting.get("fallback_quality_weight"),
                base.fallback_quality_weight,
            ),
        ),
        vocabulary_limit=max(
            1, coerce_int(merging.get("vocabulary_limit"), base.vocabulary_limit)
        ),
        avoidance_limit=max(
            1, coerce_int(merging.get("avoidance_limit"), base.avoidance_limit)
        ),
        avoidance_appearance_threshold=coerce_float(
            merging.get("avoidance_appearance_threshold"),
            base.avoidance_appearance_threshold,
        ),
        avoidance_weight_threshold=coerce_float(
            merging.get("avoidance_weight_threshold"),
            base.avoidance_weight_threshold,
        ),
        spam_duplicate_ratio=coerce_float(
            merging.get("spam_duplicate_ratio"), base.spam_duplicate_ratio
        ),
        minimum_vocabulary_diversity=coerce_float(
            merging.get("minimum_vocabulary_diversity"),
            base.minimum_vocabulary_diversity,
        ),
        diversity_word_floor=coerce_int(
            merging.get("diversity_word_floor"), base.diversity_word_floor
        ),
    )
