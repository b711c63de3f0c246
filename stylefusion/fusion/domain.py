"""Domain value objects for multi-source style fusion.

This module defines the closed categorical vocabularies, the per-source
assessment consumed by the engine, the ephemeral weighted representation
built for each run, and the merged profile it returns.

Examples
--------
Build an assessment for one source:

>>> assessment = SourceAssessment(
...     source_type=SourceType.CORRESPONDENCE,
...     word_count=2000,
...     tone="conversational",
...     formality="casual",
...     sentence_length="short",
...     vocabulary=("direct", "relatable"),
...     avoidance=("emojis",),
... )
"""

import collections.abc as cabc
import dataclasses as dc
import enum

type JsonMapping = dict[str, object]

#: Sentinel avoidance entry meaning "the author avoids nothing in particular".
AVOIDANCE_NONE = "none"

#: Names of the five style attributes in merge order.
STYLE_ATTRIBUTES: tuple[str, ...] = (
    "tone",
    "formality",
    "sentence_length",
    "vocabulary",
    "avoidance",
)


class SourceType(enum.StrEnum):
    """Known data channels that produce style assessments."""

    CORRESPONDENCE = "correspondence"
    EXISTING_PROFILE = "existing_profile"
    FREE_TEXT = "free_text"
    REPOSITORY = "repository"
    ARTICLE = "article"


class Tone(enum.StrEnum):
    """Overall register of the author's writing."""

    CONVERSATIONAL = "conversational"
    PROFESSIONAL = "professional"
    NEUTRAL = "neutral"


class Formality(enum.StrEnum):
    """Formality level, ordered from least to most formal."""

    CASUAL = "casual"
    BALANCED = "balanced"
    FORMAL = "formal"


class SentenceLength(enum.StrEnum):
    """Typical sentence length bucket."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


#: Values substituted when an analyser reports something outside the enum.
DEFAULT_TONE = Tone.NEUTRAL
DEFAULT_FORMALITY = Formality.BALANCED
DEFAULT_SENTENCE_LENGTH = SentenceLength.MEDIUM


@dc.dataclass(frozen=True, slots=True)
class SourceQuality:
    """Quality signals measured on a source's raw text by an external detector.

    Attributes
    ----------
    duplicate_sentence_ratio : float | None
        Fraction of sentences that repeat an earlier sentence, in [0, 1].
    vocabulary_diversity : float | None
        Unique words divided by total words, in [0, 1].
    """

    duplicate_sentence_ratio: float | None = None
    vocabulary_diversity: float | None = None


@dc.dataclass(frozen=True, slots=True)
class QualitySignals:
    """Batch-level collaborator flags consumed by the confidence calculator.

    Attributes
    ----------
    advanced_analysis_succeeded : bool
        Whether a deeper linguistic analysis completed for this batch.
    spam_detected : bool
        Whether an upstream detector already flagged copy-paste duplication.
    """

    advanced_analysis_succeeded: bool = False
    spam_detected: bool = False


@dc.dataclass(frozen=True, slots=True)
class SourceAssessment:
    """One source's already-computed style signal.

    Categorical fields hold the analyser's raw strings; they are coerced to
    their enums during merging so unexpected values degrade to defaults
    instead of failing.

    Attributes
    ----------
    source_type : str
        Channel that produced the assessment, usually a ``SourceType`` value.
    word_count : int | None
        Volume of text the assessment was derived from, ``None`` if unknown.
    tone : str | None
        Reported tone.
    formality : str | None
        Reported formality.
    sentence_length : str | None
        Reported sentence length bucket.
    vocabulary : tuple[str, ...] | None
        Signature terms.
    avoidance : tuple[str, ...] | None
        Avoided terms or styles, or ``("none",)``.
    quality : SourceQuality | None
        Optional raw-text quality signals for this source.
    """

    source_type: str
    word_count: int | None = None
    tone: str | None = None
    formality: str | None = None
    sentence_length: str | None = None
    vocabulary: tuple[str, ...] | None = None
    avoidance: tuple[str, ...] | None = None
    quality: SourceQuality | None = None

    def missing_fields(self) -> tuple[str, ...]:
        """Return the names of style fields that are absent or empty."""
        return tuple(
            name for name in STYLE_ATTRIBUTES if _is_blank(getattr(self, name))
        )

    def is_valid(self) -> bool:
        """Return True when every style field is present and non-empty."""
        return not self.missing_fields()


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, cabc.Sequence):
        return len(value) == 0
    return False


@dc.dataclass(frozen=True, slots=True)
class WeightedSource:
    """A validated assessment annotated with its influence in one batch.

    Attributes
    ----------
    assessment : SourceAssessment
        The source being weighted.
    quality_weight : float
        Weight derived from the source type.
    quantity_factor : float
        Multiplier derived from the word-count bucket.
    raw_weight : float
        ``quality_weight * quantity_factor``.
    normalised_weight : float
        ``raw_weight`` divided by the batch total; 0.0 until normalised.
    """

    assessment: SourceAssessment
    quality_weight: float
    quantity_factor: float
    raw_weight: float
    normalised_weight: float = 0.0

    @property
    def source_type(self) -> str:
        """Return the source type of the wrapped assessment."""
        return self.assessment.source_type


@dc.dataclass(frozen=True, slots=True)
class Contribution:
    """One source's share in a merged value.

    Attributes
    ----------
    source_type : str
        Type of the contributing source.
    percentage : int
        Integer share in the range [0, 100].
    """

    source_type: str
    percentage: int

    def __post_init__(self) -> None:
        """Reject percentages outside [0, 100]."""
        if not 0 <= self.percentage <= 100:  # noqa: PLR2004
            msg = f"Contribution percentage must be in [0, 100], got {self.percentage}."
            raise ValueError(msg)


@dc.dataclass(frozen=True, slots=True)
class MergedAttribute[T]:
    """Output of one attribute merger.

    Attributes
    ----------
    value : T
        Merged categorical value or merged term sequence.
    contributions : tuple[Contribution, ...]
        Attribute-level breakdown of which sources produced ``value``.
    term_contributions : Mapping[str, tuple[Contribution, ...]]
        Per-term breakdown for set-valued attributes; empty otherwise.
    warnings : tuple[str, ...]
        Non-fatal coercion notes raised while merging.
    details : JsonMapping
        Strategy-specific diagnostics such as tallies or term scores.
    """

    value: T
    contributions: tuple[Contribution, ...]
    term_contributions: cabc.Mapping[str, tuple[Contribution, ...]] = dc.field(
        default_factory=dict
    )
    warnings: tuple[str, ...] = ()
    details: JsonMapping = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class AttributeAttribution:
    """Profile-visible attribution for one attribute.

    Attributes
    ----------
    value : object
        The merged value the attribution explains.
    sources : tuple[Contribution, ...]
        Attribute-level contributions.
    terms : Mapping[str, tuple[Contribution, ...]]
        Per-term contributions for vocabulary and avoidance.
    """

    value: object
    sources: tuple[Contribution, ...]
    terms: cabc.Mapping[str, tuple[Contribution, ...]] = dc.field(
        default_factory=dict
    )


@dc.dataclass(frozen=True, slots=True)
class MergedProfile:
    """The fused style profile returned by the engine.

    Attributes
    ----------
    tone : Tone
        Merged tone.
    formality : Formality
        Merged formality.
    sentence_length : SentenceLength
        Merged sentence length.
    vocabulary : tuple[str, ...]
        Up to four signature terms.
    avoidance : tuple[str, ...]
        Up to three avoided terms, or ``("none",)``.
    attribution : Mapping[str, AttributeAttribution]
        Per-attribute source attribution keyed by attribute name.
    confidence : float
        Overall confidence in [0.0, 0.95].
    sources_used : int
        Number of sources that survived validation.
    warnings : tuple[str, ...]
        Non-fatal notes collected during the run.
    """

    tone: Tone
    formality: Formality
    sentence_length: SentenceLength
    vocabulary: tuple[str, ...]
    avoidance: tuple[str, ...]
    attribution: cabc.Mapping[str, AttributeAttribution]
    confidence: float
    sources_used: int
    warnings: tuple[str, ...] = ()


def default_profile(*, warnings: tuple[str, ...] = ()) -> MergedProfile:
    """Return the degraded profile used when no source survives validation."""
    return MergedProfile(
        tone=DEFAULT_TONE,
        formality=DEFAULT_FORMALITY,
        sentence_length=DEFAULT_SENTENCE_LENGTH,
        vocabulary=(),
        avoidance=(AVOIDANCE_NONE,),
        attribution={},
        confidence=0.30,
        sources_used=0,
        warnings=warnings,
    )
