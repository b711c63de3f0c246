"""Unit tests for fusion payload conversion."""

from __future__ import annotations

import types
import typing as typ

import pytest
from _fusion_helpers import make_assessment

from stylefusion.fusion import fuse_assessments
from stylefusion.fusion.domain import (
    Contribution,
    SentenceLength,
    SourceQuality,
    Tone,
)
from stylefusion.fusion.refinement import AttributeChange, DeltaReport
from stylefusion.fusion.serializers import (
    UNKNOWN_SOURCE_TYPE,
    assessment_from_mapping,
    normalise_assessment,
    serialize_delta_report,
    serialize_merged_profile,
)


def test_camel_case_payload_is_read() -> None:
    """Analyser payloads with camelCase keys map onto the assessment."""
    assessment = assessment_from_mapping({
        "sourceType": "article",
        "wordCount": "1200",
        "tone": "professional",
        "formality": "formal",
        "sentenceLength": "long",
        "vocabulary": ["precise", "measured"],
        "avoidance": ["slang"],
        "quality": {"duplicateSentenceRatio": 0.1, "vocabularyDiversity": 0.6},
    })

    assert assessment.source_type == "article", "Expected the source type."
    assert assessment.word_count == 1200, "Expected a numeric word count."
    assert assessment.sentence_length == "long", "Expected the sentence length."
    assert assessment.vocabulary == ("precise", "measured"), (
        "Expected the vocabulary as a tuple."
    )
    assert assessment.quality == SourceQuality(
        duplicate_sentence_ratio=0.1, vocabulary_diversity=0.6
    ), "Expected the quality signals."
    assert assessment.is_valid(), "Expected a complete payload to validate."


def test_camel_case_key_wins_over_snake_case() -> None:
    """When both spellings are present the camelCase value is used."""
    assessment = assessment_from_mapping({
        "source_type": "repository",
        "sourceType": "correspondence",
        "word_count": 10,
        "wordCount": 900,
    })

    assert assessment.source_type == "correspondence", (
        "Expected the camelCase source type."
    )
    assert assessment.word_count == 900, "Expected the camelCase word count."


@pytest.mark.parametrize("source_type", [None, "", "   ", 7])
def test_missing_source_type_becomes_unknown(source_type: object) -> None:
    """Blank or non-string source types are recorded as unknown."""
    assessment = assessment_from_mapping({"sourceType": source_type})

    assert assessment.source_type == UNKNOWN_SOURCE_TYPE, (
        f"Expected {UNKNOWN_SOURCE_TYPE!r} for {source_type!r}."
    )


def test_junk_values_are_coerced_without_raising() -> None:
    """Unusable values degrade rather than fail."""
    assessment = assessment_from_mapping({
        "source_type": "free_text",
        "word_count": -40,
        "tone": 3,
        "vocabulary": ["clear", 5, "", "clear", None],
        "avoidance": {"not": "a list"},
        "quality": {"duplicate_sentence_ratio": "lots", "vocabulary_diversity": -1},
    })

    assert assessment.word_count is None, "Expected a negative count to be unknown."
    assert assessment.tone == "3", "Expected non-string tones as text."
    assert assessment.vocabulary == ("clear",), (
        "Expected junk and repeated terms to be dropped."
    )
    assert assessment.avoidance is None, "Expected a mapping to be rejected."
    assert assessment.quality == SourceQuality(), (
        "Expected invalid quality values to be unknown."
    )


def test_non_mapping_quality_is_ignored() -> None:
    """A quality value that is not a mapping is dropped."""
    assessment = assessment_from_mapping({"sourceType": "article", "quality": 0.4})

    assert assessment.quality is None, "Expected no quality signals."


def test_read_only_mapping_quality_is_read() -> None:
    """Quality signals are read from any mapping, not only dicts."""
    quality = types.MappingProxyType({
        "duplicateSentenceRatio": "0.8",
        "vocabulary_diversity": 0.4,
    })

    assessment = assessment_from_mapping({"sourceType": "article", "quality": quality})

    assert assessment.quality == SourceQuality(
        duplicate_sentence_ratio=0.8, vocabulary_diversity=0.4
    ), f"Unexpected quality {assessment.quality!r}."


def test_normalise_assessment_coerces_instance_fields() -> None:
    """Loosely typed instance fields are coerced like mapping values."""
    assessment = make_assessment(
        word_count=typ.cast("int", "1500.9"),
        avoidance=typ.cast("tuple[str, ...]", ["slang", 4, "slang"]),
        quality=typ.cast(
            "SourceQuality", types.MappingProxyType({"vocabularyDiversity": "0.3"})
        ),
    )

    normalised = normalise_assessment(assessment)

    assert normalised.word_count == 1500, "Expected a truncated integer count."
    assert normalised.avoidance == ("slang",), "Expected string-only terms."
    assert normalised.quality == SourceQuality(vocabulary_diversity=0.3), (
        f"Unexpected quality {normalised.quality!r}."
    )
    assert normalised.vocabulary == assessment.vocabulary, (
        "Expected valid fields to be unchanged."
    )


def test_merged_profile_serialises_with_camel_case_keys() -> None:
    """The serialised profile is JSON-ready with camelCase keys."""
    profile = fuse_assessments([
        make_assessment(word_count=2000),
        make_assessment("article", tone="professional", sentence_length="long"),
    ])

    payload = serialize_merged_profile(profile)

    assert list(payload) == [
        "tone",
        "formality",
        "sentenceLength",
        "vocabulary",
        "avoidance",
        "confidence",
        "sourcesUsed",
        "attribution",
        "warnings",
    ], f"Unexpected keys: {list(payload)!r}."
    assert payload["tone"] == "conversational", "Expected the tone as text."
    assert type(payload["tone"]) is str, "Expected a plain string, not an enum."
    assert payload["sourcesUsed"] == 2, "Expected both sources counted."
    assert "sentenceLength" in payload["attribution"], (
        "Expected camelCase attribute names in the attribution map."
    )
    vocabulary = payload["attribution"]["vocabulary"]
    assert isinstance(vocabulary["value"], list), "Expected term lists as lists."
    assert vocabulary["terms"]["direct"] == [
        {"sourceType": "correspondence", "percentage": 70},
        {"sourceType": "article", "percentage": 30},
    ], f"Unexpected term breakdown: {vocabulary['terms']!r}."


def test_delta_report_serialises_values() -> None:
    """Enum values become text and term tuples become lists."""
    report = DeltaReport(
        changes=(
            AttributeChange(
                "sentence_length", SentenceLength.LONG, SentenceLength.SHORT, 100
            ),
            AttributeChange("vocabulary", ("precise",), ("vivid",), 100),
        ),
        words_analysed=640,
        confidence_change=0.02,
    )

    payload = serialize_delta_report(report)

    assert payload == {
        "changes": [
            {
                "attribute": "sentenceLength",
                "oldValue": "long",
                "newValue": "short",
                "changePercent": 100,
            },
            {
                "attribute": "vocabulary",
                "oldValue": ["precise"],
                "newValue": ["vivid"],
                "changePercent": 100,
            },
        ],
        "wordsAnalysed": 640,
        "confidenceChange": 0.02,
    }, f"Unexpected payload: {payload!r}."


def test_attribution_entries_carry_source_shares() -> None:
    """A single source owns every attribute outright."""
    profile = fuse_assessments([make_assessment(tone="professional")])

    payload = serialize_merged_profile(profile)

    assert payload["attribution"]["tone"] == {
        "value": str(Tone.PROFESSIONAL),
        "sources": [{"sourceType": "correspondence", "percentage": 100}],
        "terms": {},
    }, f"Unexpected tone attribution: {payload['attribution']['tone']!r}."
    assert profile.attribution["tone"].sources == (
        Contribution("correspondence", 100),
    ), "Expected the profile to keep its Contribution objects."
