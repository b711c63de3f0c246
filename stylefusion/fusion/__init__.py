"""Multi-source writing-style fusion.

This package exposes the fusion domain model together with the fusion,
refinement, and serialization entry points used by callers.

Examples
--------
Fuse analyser output and serialize the result:

>>> profile = fuse_assessments([
...     {"sourceType": "correspondence", "wordCount": 2000, "tone": "conversational",
...      "formality": "casual", "sentenceLength": "short",
...      "vocabulary": ["direct"], "avoidance": ["emojis"]},
... ])
>>> serialize_merged_profile(profile)["tone"]
'conversational'
>>> result = refine_profile(profile, new_assessment, word_count=400)
"""

from .attribution import assemble_attribution
from .confidence import (
    ConfidenceBreakdown,
    base_confidence,
    calculate_confidence,
    score_confidence,
    total_word_volume,
)
from .domain import (
    AVOIDANCE_NONE,
    STYLE_ATTRIBUTES,
    AttributeAttribution,
    Contribution,
    Formality,
    MergedAttribute,
    MergedProfile,
    QualitySignals,
    SentenceLength,
    SourceAssessment,
    SourceQuality,
    SourceType,
    Tone,
    WeightedSource,
    default_profile,
)
from .ports import AttributeMerger, WeightingStrategy
from .quality import assess_text_quality, duplicate_sentence_ratio, vocabulary_diversity
from .refinement import (
    AttributeChange,
    DeltaReport,
    RefinementResult,
    build_delta_report,
    refine_profile,
)
from .serializers import (
    assessment_from_mapping,
    normalise_assessment,
    serialize_delta_report,
    serialize_merged_profile,
)
from .service import (
    ValidationOutcome,
    fuse_assessments,
    fuse_assessments_concurrently,
    validate_assessments,
)
from .settings import DEFAULT_SETTINGS, FusionSettings, settings_from_mapping

__all__: list[str] = [
    "AVOIDANCE_NONE",
    "DEFAULT_SETTINGS",
    "STYLE_ATTRIBUTES",
    "AttributeAttribution",
    "AttributeChange",
    "AttributeMerger",
    "ConfidenceBreakdown",
    "Contribution",
    "DeltaReport",
    "Formality",
    "FusionSettings",
    "MergedAttribute",
    "MergedProfile",
    "QualitySignals",
    "RefinementResult",
    "SentenceLength",
    "SourceAssessment",
    "SourceQuality",
    "SourceType",
    "Tone",
    "ValidationOutcome",
    "WeightedSource",
    "WeightingStrategy",
    "assemble_attribution",
    "assess_text_quality",
    "assessment_from_mapping",
    "base_confidence",
    "build_delta_report",
    "calculate_confidence",
    "default_profile",
    "duplicate_sentence_ratio",
    "fuse_assessments",
    "fuse_assessments_concurrently",
    "normalise_assessment",
    "refine_profile",
    "score_confidence",
    "serialize_delta_report",
    "serialize_merged_profile",
    "settings_from_mapping",
    "total_word_volume",
    "validate_assessments",
    "vocabulary_diversity",
]
