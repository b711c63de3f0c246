"""Incremental refinement of a fused profile.

A refinement folds one new assessment into an existing profile without
re-running fusion. How far the profile moves is damped by its confidence:
a well-established profile moves little, a tentative one moves more, and
small samples move it less than large ones.

Examples
--------
Refine a profile with a conversation sample:

>>> result = refine_profile(profile, assessment, word_count=600)
>>> [change.attribute for change in result.report.changes]
['tone']
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from stylefusion.logging import get_logger, log_info

from .adapters._coercion import coerce_category, coerce_terms, coerce_word_count
from .domain import (
    DEFAULT_FORMALITY,
    DEFAULT_SENTENCE_LENGTH,
    DEFAULT_TONE,
    Formality,
    SentenceLength,
    Tone,
)
from .mergers._shares import SCORE_PRECISION, percentage
from .mergers.voting import coercion_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import AttributeAttribution, MergedProfile, SourceAssessment

logger = get_logger(__name__)

_HIGH_CONFIDENCE = 0.8
_MEDIUM_CONFIDENCE = 0.5
_FULL_SAMPLE_WORDS = 500
_CONFIDENCE_STEP = 0.05
_CONFIDENCE_CEILING = 0.95

_CATEGORICAL_FIELDS: tuple[tuple[str, type[enum.StrEnum], enum.StrEnum], ...] = (
    ("tone", Tone, DEFAULT_TONE),
    ("formality", Formality, DEFAULT_FORMALITY),
    ("sentence_length", SentenceLength, DEFAULT_SENTENCE_LENGTH),
)
_TERM_FIELDS: tuple[str, ...] = ("vocabulary", "avoidance")


@dc.dataclass(frozen=True, slots=True)
class AttributeChange:
    """One attribute that moved during a refinement.

    Attributes
    ----------
    attribute : str
        Attribute name.
    old_value : object
        Value before the refinement.
    new_value : object
        Value after the refinement.
    change_percentage : int
        100 for a categorical change; for term lists, the share of new
        entries that were not in the old list.
    """

    attribute: str
    old_value: object
    new_value: object
    change_percentage: int


@dc.dataclass(frozen=True, slots=True)
class DeltaReport:
    """Summary of what a refinement changed."""

    changes: tuple[AttributeChange, ...]
    words_analysed: int
    confidence_change: float


@dc.dataclass(frozen=True, slots=True)
class RefinementResult:
    """Refined profile together with its delta report."""

    profile: MergedProfile
    report: DeltaReport


def maximum_adjustment(confidence: float) -> float:
    """Return the largest move a profile at ``confidence`` may make."""
    if confidence >= _HIGH_CONFIDENCE:
        return 0.05
    if confidence >= _MEDIUM_CONFIDENCE:
        return 0.10
    return 0.20


def change_threshold(confidence: float) -> float:
    """Return the adjustment a categorical attribute needs before it changes."""
    return 0.04 if confidence >= _HIGH_CONFIDENCE else 0.03


def word_factor(word_count: int) -> float:
    """Scale influence by sample size; 500 words or more count in full."""
    return min(1.0, max(0, word_count) / _FULL_SAMPLE_WORDS)


def blend_terms(
    current: cabc.Sequence[str],
    incoming: cabc.Sequence[str],
    adjustment: float,
) -> tuple[str, ...]:
    """Blend ``incoming`` terms into ``current``, keeping the current length.

    Existing terms score ``1 - adjustment``, new terms score ``adjustment``,
    and terms in both lists score the sum. Ties keep existing terms first.
    """
    scores: dict[str, float] = dict.fromkeys(current, 1.0 - adjustment)
    for term in incoming:
        scores[term] = scores.get(term, 0.0) + adjustment
    ranked = sorted(scores, key=lambda term: -round(scores[term], SCORE_PRECISION))
    return tuple(ranked[: len(current)])


def refined_confidence(confidence: float, word_count: int) -> float:
    """Raise ``confidence`` with diminishing returns, capped at 0.95."""
    raised = confidence + _CONFIDENCE_STEP * word_factor(word_count) * (
        1.0 - confidence
    )
    return round(min(_CONFIDENCE_CEILING, raised), 2)


def _term_change_percentage(
    old_terms: cabc.Sequence[str], new_terms: cabc.Sequence[str]
) -> int:
    if not new_terms:
        return 0
    previous = set(old_terms)
    added = sum(1 for term in new_terms if term not in previous)
    return percentage(added / len(new_terms))


def build_delta_report(
    old_profile: MergedProfile,
    new_profile: MergedProfile,
    words_analysed: int,
) -> DeltaReport:
    """Compare two profiles and report what moved.

    Parameters
    ----------
    old_profile : MergedProfile
        Profile before the refinement.
    new_profile : MergedProfile
        Profile after the refinement.
    words_analysed : int
        Size of the sample that drove the refinement.

    Returns
    -------
    DeltaReport
        Changed attributes, the sample size, and the confidence change
        rounded to two places.
    """
    changes: list[AttributeChange] = []
    for name, _, _ in _CATEGORICAL_FIELDS:
        old_value = getattr(old_profile, name)
        new_value = getattr(new_profile, name)
        if old_value != new_value:
            changes.append(AttributeChange(name, old_value, new_value, 100))
    for name in _TERM_FIELDS:
        old_terms = getattr(old_profile, name)
        new_terms = getattr(new_profile, name)
        changed = _term_change_percentage(old_terms, new_terms)
        if changed > 0:
            changes.append(AttributeChange(name, old_terms, new_terms, changed))
    return DeltaReport(
        changes=tuple(changes),
        words_analysed=words_analysed,
        confidence_change=round(new_profile.confidence - old_profile.confidence, 2),
    )


def _carry_attribution(
    attribution: cabc.Mapping[str, AttributeAttribution],
    updates: cabc.Mapping[str, object],
) -> dict[str, AttributeAttribution]:
    carried: dict[str, AttributeAttribution] = {}
    for name, entry in attribution.items():
        if name not in updates:
            carried[name] = entry
        elif name in _TERM_FIELDS and set(
            typ.cast("tuple[str, ...]", updates[name])
        ) == set(typ.cast("tuple[str, ...]", entry.value)):
            carried[name] = dc.replace(entry, value=updates[name])
    return carried


def refine_profile(
    profile: MergedProfile,
    assessment: SourceAssessment,
    word_count: int | None = None,
) -> RefinementResult:
    """Fold one new assessment into an existing profile.

    Parameters
    ----------
    profile : MergedProfile
        Profile to refine.
    assessment : SourceAssessment
        Style signal extracted from the new sample.
    word_count : int | None, optional
        Size of the new sample; the assessment's own word count is used when
        omitted, and an unknown size counts as zero.

    Returns
    -------
    RefinementResult
        The refined profile and a delta report against ``profile``.

    Notes
    -----
    Attribution entries of attributes whose values changed are dropped
    because the fused sources no longer explain them; a term list that was
    only reordered keeps its entry. A missing categorical value leaves the
    attribute untouched; an unrecognised one is coerced to its default with
    a warning, as during fusion.
    """
    words = coerce_word_count(
        word_count if word_count is not None else assessment.word_count
    )
    words = words or 0
    adjustment = maximum_adjustment(profile.confidence) * word_factor(words)
    threshold = change_threshold(profile.confidence)
    warnings: list[str] = []
    updates: dict[str, object] = {}

    for name, enum_type, default in _CATEGORICAL_FIELDS:
        raw_value = getattr(assessment, name)
        if raw_value is None:
            continue
        value, substituted = coerce_category(raw_value, enum_type, default)
        if substituted:
            warnings.append(
                coercion_warning(name, raw_value, assessment.source_type, default)
            )
        if value != getattr(profile, name) and adjustment >= threshold:
            updates[name] = value

    for name in _TERM_FIELDS:
        incoming = coerce_terms(getattr(assessment, name)) or ()
        blended = blend_terms(getattr(profile, name), incoming, adjustment)
        if blended != getattr(profile, name):
            updates[name] = blended

    refined = dc.replace(
        profile,
        **updates,
        attribution=_carry_attribution(profile.attribution, updates),
        confidence=refined_confidence(profile.confidence, words),
        sources_used=profile.sources_used + 1,
        warnings=profile.warnings + tuple(warnings),
    )
    report = build_delta_report(profile, refined, words)
    log_info(
        logger,
        "Refined profile with %s words from %r source: %s attribute(s) changed, "
        "confidence %.2f -> %.2f.",
        words,
        assessment.source_type,
        len(report.changes),
        profile.confidence,
        refined.confidence,
    )
    return RefinementResult(profile=refined, report=report)
