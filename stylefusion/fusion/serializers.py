"""Conversions between fusion value objects and JSON-ready mappings.

Upstream analysers hand over loosely typed mappings, and downstream
persistence and prompt construction expect plain dictionaries with camelCase
keys. Both directions live here so the engine itself only sees dataclasses.
"""

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from .adapters._coercion import coerce_float, coerce_terms, coerce_word_count
from .domain import SourceAssessment, SourceQuality

if typ.TYPE_CHECKING:
    from .domain import AttributeAttribution, Contribution, MergedProfile
    from .refinement import DeltaReport

#: Source type recorded when a mapping does not name one.
UNKNOWN_SOURCE_TYPE = "unknown"

_CAMEL_CASE_KEYS: dict[str, str] = {
    "source_type": "sourceType",
    "word_count": "wordCount",
    "sentence_length": "sentenceLength",
    "duplicate_sentence_ratio": "duplicateSentenceRatio",
    "vocabulary_diversity": "vocabularyDiversity",
}


def _lookup(payload: cabc.Mapping[str, object], key: str) -> object:
    camel = _CAMEL_CASE_KEYS.get(key)
    if camel is not None and camel in payload:
        return payload[camel]
    return payload.get(key)


def _raw_category(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _source_type(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNKNOWN_SOURCE_TYPE


def _ratio(value: object) -> float | None:
    converted = coerce_float(value, -1.0)
    return converted if converted >= 0.0 else None


def _coerce_quality(value: object) -> SourceQuality | None:
    if isinstance(value, SourceQuality):
        ratio = value.duplicate_sentence_ratio
        diversity = value.vocabulary_diversity
    elif isinstance(value, cabc.Mapping):
        payload = typ.cast("cabc.Mapping[str, object]", value)
        ratio = _lookup(payload, "duplicate_sentence_ratio")
        diversity = _lookup(payload, "vocabulary_diversity")
    else:
        return None
    return SourceQuality(
        duplicate_sentence_ratio=_ratio(ratio),
        vocabulary_diversity=_ratio(diversity),
    )


def assessment_from_mapping(payload: cabc.Mapping[str, object]) -> SourceAssessment:
    """Build an assessment from an analyser payload.

    Keys may be camelCase (``sourceType``, ``wordCount``, ``sentenceLength``)
    or snake_case; camelCase wins when both are present. Values are coerced
    best-effort and never raise: unusable word counts become unknown, term
    lists drop non-string entries, and categorical values are kept as
    strings for the mergers to coerce.

    Parameters
    ----------
    payload : Mapping[str, object]
        Loosely typed analyser output.

    Returns
    -------
    SourceAssessment
        The coerced assessment, which may still be invalid if style fields
        are missing.
    """
    return SourceAssessment(
        source_type=_source_type(_lookup(payload, "source_type")),
        word_count=coerce_word_count(_lookup(payload, "word_count")),
        tone=_raw_category(payload.get("tone")),
        formality=_raw_category(payload.get("formality")),
        sentence_length=_raw_category(_lookup(payload, "sentence_length")),
        vocabulary=coerce_terms(payload.get("vocabulary")),
        avoidance=coerce_terms(payload.get("avoidance")),
        quality=_coerce_quality(payload.get("quality")),
    )


def normalise_assessment(assessment: SourceAssessment) -> SourceAssessment:
    """Apply the mapping coercions to an already-constructed assessment.

    Dataclass fields are not type-checked at runtime, so a caller can build
    an assessment with a list as its source type or a string ratio. The
    result has a non-empty string source type, a non-negative integer or
    unknown word count, string-only term tuples and numeric quality signals.
    """
    return dc.replace(
        assessment,
        source_type=_source_type(assessment.source_type),
        word_count=coerce_word_count(assessment.word_count),
        tone=_raw_category(assessment.tone),
        formality=_raw_category(assessment.formality),
        sentence_length=_raw_category(assessment.sentence_length),
        vocabulary=coerce_terms(assessment.vocabulary),
        avoidance=coerce_terms(assessment.avoidance),
        quality=_coerce_quality(assessment.quality),
    )


def _serialize_contributions(
    contributions: cabc.Sequence[Contribution],
) -> list[dict[str, typ.Any]]:
    return [
        {"sourceType": item.source_type, "percentage": item.percentage}
        for item in contributions
    ]


def _serialize_value(value: object) -> object:
    if isinstance(value, str):
        return str(value)
    if isinstance(value, tuple):
        return list(typ.cast("tuple[object, ...]", value))
    return value


def _serialize_attribution_entry(entry: AttributeAttribution) -> dict[str, typ.Any]:
    return {
        "value": _serialize_value(entry.value),
        "sources": _serialize_contributions(entry.sources),
        "terms": {
            term: _serialize_contributions(contributions)
            for term, contributions in entry.terms.items()
        },
    }


def serialize_merged_profile(profile: MergedProfile) -> dict[str, typ.Any]:
    """Serialize a merged profile with camelCase keys."""
    return {
        "tone": str(profile.tone),
        "formality": str(profile.formality),
        "sentenceLength": str(profile.sentence_length),
        "vocabulary": list(profile.vocabulary),
        "avoidance": list(profile.avoidance),
        "confidence": profile.confidence,
        "sourcesUsed": profile.sources_used,
        "attribution": {
            _CAMEL_CASE_KEYS.get(name, name): _serialize_attribution_entry(entry)
            for name, entry in profile.attribution.items()
        },
        "warnings": list(profile.warnings),
    }


def serialize_delta_report(report: DeltaReport) -> dict[str, typ.Any]:
    """Serialize a refinement delta report with camelCase keys."""
    return {
        "changes": [
            {
                "attribute": _CAMEL_CASE_KEYS.get(change.attribute, change.attribute),
                "oldValue": _serialize_value(change.old_value),
                "newValue": _serialize_value(change.new_value),
                "changePercent": change.change_percentage,
            }
            for change in report.changes
        ],
        "wordsAnalysed": report.words_analysed,
        "confidenceChange": report.confidence_change,
    }
