"""Multi-source style fusion orchestrator.

This module provides ``fuse_assessments`` and its async counterpart
``fuse_assessments_concurrently``. Both validate the incoming assessments,
weigh and normalise the survivors once, run every attribute merger over that
single weight snapshot, score confidence, and assemble the attribution map.

Neither entry point raises for malformed input: unusable sources are
dropped and logged, unrecognised values are coerced, and an empty batch
yields the default profile.

Examples
--------
Fuse two sources synchronously:

>>> profile = fuse_assessments([correspondence, article])
>>> profile.sources_used
2

Fan the mergers out as tasks:

>>> profile = await fuse_assessments_concurrently(
...     [correspondence, article], correlation_id="user-42"
... )
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc
import typing as typ

from stylefusion.asyncio_tasks import create_task_in_group
from stylefusion.logging import get_logger, log_info, log_warning

from .adapters.weighting import SourceTypeWeightingStrategy, weigh_sources
from .attribution import assemble_attribution
from .confidence import score_confidence
from .domain import (
    AVOIDANCE_NONE,
    DEFAULT_FORMALITY,
    DEFAULT_SENTENCE_LENGTH,
    DEFAULT_TONE,
    MergedProfile,
    SourceAssessment,
    default_profile,
)
from .mergers import default_mergers
from .serializers import assessment_from_mapping, normalise_assessment
from .settings import DEFAULT_SETTINGS

logger = get_logger(__name__)

if typ.TYPE_CHECKING:
    from stylefusion.asyncio_tasks import TaskMetadata

    from .domain import MergedAttribute, QualitySignals, WeightedSource
    from .ports import AttributeMerger, WeightingStrategy
    from .settings import FusionSettings


@dc.dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Assessments that survived validation and notes on those that did not.

    Attributes
    ----------
    accepted : tuple[SourceAssessment, ...]
        Valid assessments in input order.
    warnings : tuple[str, ...]
        One note per dropped entry.
    """

    accepted: tuple[SourceAssessment, ...]
    warnings: tuple[str, ...]


def _as_entries(assessments: object) -> tuple[tuple[object, ...], tuple[str, ...]]:
    if assessments is None:
        return ((), ())
    if isinstance(assessments, (SourceAssessment, cabc.Mapping)):
        return ((assessments,), ())
    if isinstance(assessments, (str, bytes)) or not isinstance(
        assessments, cabc.Iterable
    ):
        message = (
            f"Expected a sequence of assessments, got {type(assessments).__name__!r}; "
            "no sources used."
        )
        log_warning(logger, message)
        return ((), (message,))
    return (tuple(typ.cast("cabc.Iterable[object]", assessments)), ())


def validate_assessments(assessments: object) -> ValidationOutcome:
    """Coerce and filter caller input down to valid assessments.

    Mappings are converted with ``assessment_from_mapping`` and assessment
    instances pass through the same coercions via ``normalise_assessment``.
    Entries that are neither mappings nor assessments, and assessments with
    missing or empty style fields, are dropped with a logged warning naming the
    source type and the missing fields.

    Parameters
    ----------
    assessments : object
        Usually a sequence of ``SourceAssessment`` objects or analyser
        mappings; any other shape is tolerated.

    Returns
    -------
    ValidationOutcome
        Surviving assessments and the notes about dropped entries.
    """
    entries, warnings = _as_entries(assessments)
    accepted: list[SourceAssessment] = []
    notes = list(warnings)
    for index, entry in enumerate(entries):
        if isinstance(entry, SourceAssessment):
            assessment = normalise_assessment(entry)
        elif isinstance(entry, cabc.Mapping):
            assessment = assessment_from_mapping(
                typ.cast("cabc.Mapping[str, object]", entry)
            )
        else:
            message = (
                f"Dropped source at position {index}: unsupported entry type "
                f"{type(entry).__name__!r}."
            )
            log_warning(logger, message)
            notes.append(message)
            continue

        missing = assessment.missing_fields()
        if missing:
            message = (
                f"Dropped {assessment.source_type!r} source at position {index}: "
                f"missing {', '.join(missing)}."
            )
            log_warning(logger, message)
            notes.append(message)
            continue
        accepted.append(assessment)
    return ValidationOutcome(accepted=tuple(accepted), warnings=tuple(notes))


def _merge_all(
    mergers: cabc.Sequence[AttributeMerger],
    weighted: cabc.Sequence[WeightedSource],
) -> dict[str, MergedAttribute[typ.Any]]:
    return {merger.attribute: merger.merge(weighted) for merger in mergers}


def _compose_profile(
    results: cabc.Mapping[str, MergedAttribute[typ.Any]],
    weighted: cabc.Sequence[WeightedSource],
    *,
    validation_warnings: tuple[str, ...],
    signals: QualitySignals | None,
    settings: FusionSettings,
) -> MergedProfile:
    """Score confidence, assemble attribution, and build the profile."""
    breakdown = score_confidence(weighted, signals, settings)
    warnings = list(validation_warnings)
    for result in results.values():
        warnings.extend(result.warnings)

    def value_of(name: str, default: object) -> typ.Any:  # noqa: ANN401
        result = results.get(name)
        return default if result is None else result.value

    profile = MergedProfile(
        tone=value_of("tone", DEFAULT_TONE),
        formality=value_of("formality", DEFAULT_FORMALITY),
        sentence_length=value_of("sentence_length", DEFAULT_SENTENCE_LENGTH),
        vocabulary=value_of("vocabulary", ()),
        avoidance=value_of("avoidance", (AVOIDANCE_NONE,)),
        attribution=assemble_attribution(results),
        confidence=breakdown.value,
        sources_used=len(weighted),
        warnings=tuple(warnings),
    )
    log_info(
        logger,
        "Style fusion complete: %s sources, tone=%s, formality=%s, "
        "sentence_length=%s, confidence=%.2f (base %.2f, penalties: %s).",
        profile.sources_used,
        profile.tone,
        profile.formality,
        profile.sentence_length,
        profile.confidence,
        breakdown.base,
        ", ".join(breakdown.penalties) or "none",
    )
    return profile


def _empty_batch_profile(validation: ValidationOutcome) -> MergedProfile:
    log_info(logger, "Style fusion found no valid sources; using the default profile.")
    return default_profile(warnings=validation.warnings)


def fuse_assessments(
    assessments: object,
    signals: QualitySignals | None = None,
    settings: FusionSettings | None = None,
    *,
    mergers: cabc.Sequence[AttributeMerger] | None = None,
) -> MergedProfile:
    """Fuse per-source assessments into one style profile.

    Parameters
    ----------
    assessments : object
        Sequence of ``SourceAssessment`` objects or analyser mappings.
    signals : QualitySignals | None, optional
        Batch-level collaborator flags for the confidence calculator.
    settings : FusionSettings | None, optional
        Tunables; the documented defaults apply when omitted.
    mergers : Sequence[AttributeMerger] | None, optional
        Replacement mergers; the five default mergers apply when omitted.

    Returns
    -------
    MergedProfile
        The fused profile, or the default profile when no source is valid.
    """
    settings = settings or DEFAULT_SETTINGS
    validation = validate_assessments(assessments)
    if not validation.accepted:
        return _empty_batch_profile(validation)

    weighted = tuple(weigh_sources(validation.accepted, settings))
    results = _merge_all(mergers or default_mergers(settings), weighted)
    return _compose_profile(
        results,
        weighted,
        validation_warnings=validation.warnings,
        signals=signals,
        settings=settings,
    )


def _merge_task_metadata(
    *,
    attribute: str,
    correlation_id: str | None,
    merger_index: int,
) -> TaskMetadata:
    """Build task metadata for one attribute-merge task."""
    metadata: TaskMetadata = {
        "operation_name": f"stylefusion.fusion.merge.{attribute}",
        "priority_hint": merger_index,
    }
    if correlation_id:
        metadata["correlation_id"] = correlation_id
    return metadata


async def fuse_assessments_concurrently(
    assessments: object,
    signals: QualitySignals | None = None,
    settings: FusionSettings | None = None,
    *,
    weighting: WeightingStrategy | None = None,
    mergers: cabc.Sequence[AttributeMerger] | None = None,
    correlation_id: str | None = None,
) -> MergedProfile:
    """Fuse assessments with one task per attribute merger.

    The mergers run inside an ``asyncio.TaskGroup`` over the same immutable
    weight snapshot and are joined before confidence scoring and attribution
    assembly, so the result is identical to ``fuse_assessments``.

    Parameters
    ----------
    assessments : object
        Sequence of ``SourceAssessment`` objects or analyser mappings.
    signals : QualitySignals | None, optional
        Batch-level collaborator flags for the confidence calculator.
    settings : FusionSettings | None, optional
        Tunables; the documented defaults apply when omitted.
    weighting : WeightingStrategy | None, optional
        Weighting adapter; a ``SourceTypeWeightingStrategy`` built from
        ``settings`` is used when omitted.
    mergers : Sequence[AttributeMerger] | None, optional
        Replacement mergers; the five default mergers apply when omitted.
    correlation_id : str | None, optional
        Identifier attached to every merge task's metadata.

    Returns
    -------
    MergedProfile
        The fused profile, or the default profile when no source is valid.
    """
    settings = settings or DEFAULT_SETTINGS
    validation = validate_assessments(assessments)
    if not validation.accepted:
        return _empty_batch_profile(validation)

    strategy = weighting or SourceTypeWeightingStrategy(settings=settings)
    snapshot = tuple(await strategy.compute_weights(validation.accepted))
    active_mergers = tuple(mergers or default_mergers(settings))

    async with asyncio.TaskGroup() as task_group:
        tasks = [
            create_task_in_group(
                task_group,
                asyncio.to_thread(merger.merge, snapshot),
                name=f"stylefusion.fusion.merge:{merger.attribute}",
                metadata=_merge_task_metadata(
                    attribute=merger.attribute,
                    correlation_id=correlation_id,
                    merger_index=merger_index,
                ),
            )
            for merger_index, merger in enumerate(active_mergers, start=1)
        ]
    results = {
        merger.attribute: task.result()
        for merger, task in zip(active_mergers, tasks, strict=True)
    }
    return _compose_profile(
        results,
        snapshot,
        validation_warnings=validation.warnings,
        signals=signals,
        settings=settings,
    )
