"""Tests for metadata-aware task creation in the concurrent fusion path."""

from __future__ import annotations

import asyncio
import contextlib
import contextvars as cv
import typing as typ

import pytest
from _fusion_helpers import make_assessment

from stylefusion.asyncio_tasks import (
    TASK_METADATA_KWARG,
    TaskMetadata,
    create_task_in_group,
    validate_task_metadata,
)
from stylefusion.fusion import fuse_assessments_concurrently


@contextlib.contextmanager
def _recording_task_factory() -> typ.Iterator[list[dict[str, object]]]:
    """Install a task factory that records kwargs for every created task."""
    loop = asyncio.get_running_loop()
    previous_factory = loop.get_task_factory()
    captured: list[dict[str, object]] = []

    def _factory(
        running_loop: asyncio.AbstractEventLoop,
        coro: typ.Coroutine[object, object, object],
        **task_kwargs: object,
    ) -> asyncio.Task[object]:
        captured.append(dict(task_kwargs))
        return asyncio.Task(
            coro,
            loop=running_loop,
            name=typ.cast("str | None", task_kwargs.get("name")),
            context=typ.cast("cv.Context | None", task_kwargs.get("context")),
        )

    loop.set_task_factory(_factory)
    try:
        yield captured
    finally:
        loop.set_task_factory(previous_factory)


def _kwargs_named(
    captured: list[dict[str, object]], prefix: str
) -> list[dict[str, object]]:
    return [
        kwargs
        for kwargs in captured
        if isinstance(kwargs.get("name"), str)
        and typ.cast("str", kwargs["name"]).startswith(prefix)
    ]


@pytest.mark.asyncio
async def test_create_task_in_group_forwards_metadata_to_factory() -> None:
    """Validated metadata reaches an installed task factory."""

    async def _job() -> str:
        await asyncio.sleep(0)
        return "merged"

    metadata: TaskMetadata = {
        "operation_name": "tests.merge",
        "correlation_id": "user-7",
        "priority_hint": 2,
    }

    with _recording_task_factory() as captured:
        async with asyncio.TaskGroup() as group:
            task = create_task_in_group(
                group, _job(), name="merge-test", metadata=metadata
            )

    assert task.result() == "merged", "Expected the grouped task to complete."
    (kwargs,) = _kwargs_named(captured, "merge-test")
    assert kwargs[TASK_METADATA_KWARG] == metadata, (
        f"Expected metadata {metadata!r}, got {kwargs.get(TASK_METADATA_KWARG)!r}."
    )


@pytest.mark.asyncio
async def test_create_task_in_group_drops_metadata_without_factory() -> None:
    """Without a task factory the metadata is ignored and the task still runs."""
    loop = asyncio.get_running_loop()
    previous_factory = loop.get_task_factory()
    loop.set_task_factory(None)
    try:

        async def _job() -> str:
            await asyncio.sleep(0)
            return "ok"

        async with asyncio.TaskGroup() as group:
            task = create_task_in_group(
                group, _job(), metadata={"operation_name": "tests.no_factory"}
            )
    finally:
        loop.set_task_factory(previous_factory)

    assert task.result() == "ok", "Expected the task to run without a factory."


@pytest.mark.asyncio
async def test_empty_metadata_is_not_forwarded() -> None:
    """An empty metadata mapping behaves like no metadata."""

    async def _job() -> None:
        await asyncio.sleep(0)

    with _recording_task_factory() as captured:
        async with asyncio.TaskGroup() as group:
            create_task_in_group(
                group,
                _job(),
                name="empty-metadata",
                metadata=typ.cast("TaskMetadata", {}),
            )

    (kwargs,) = _kwargs_named(captured, "empty-metadata")
    assert TASK_METADATA_KWARG not in kwargs, (
        f"Expected no metadata kwarg, got {kwargs!r}."
    )


def test_validate_task_metadata_rejects_unknown_keys() -> None:
    """Unknown metadata keys raise ValueError."""
    with pytest.raises(ValueError, match="Unsupported task metadata keys"):
        validate_task_metadata(typ.cast("TaskMetadata", {"attribute": "tone"}))


@pytest.mark.parametrize(
    ("metadata", "error_type"),
    [
        ({"operation_name": 5}, TypeError),
        ({"operation_name": ""}, ValueError),
        ({"correlation_id": ""}, ValueError),
        ({"priority_hint": "first"}, TypeError),
        ({"priority_hint": False}, TypeError),
    ],
    ids=[
        "operation_name_non_string",
        "operation_name_empty",
        "correlation_id_empty",
        "priority_hint_non_int",
        "priority_hint_bool",
    ],
)
def test_validate_task_metadata_rejects_bad_values(
    metadata: dict[str, object],
    error_type: type[Exception],
) -> None:
    """Wrongly typed or empty values are rejected."""
    with pytest.raises(error_type):
        validate_task_metadata(typ.cast("TaskMetadata", metadata))


@pytest.mark.asyncio
async def test_concurrent_fusion_emits_metadata_aware_merge_tasks() -> None:
    """Each attribute merger runs as a named task carrying merge metadata."""
    assessments = [
        make_assessment("correspondence", word_count=2000),
        make_assessment("article", word_count=1200, tone="professional"),
    ]

    with _recording_task_factory() as captured:
        profile = await fuse_assessments_concurrently(
            assessments, correlation_id="user-42"
        )

    assert profile.sources_used == 2, "Expected both sources to be fused."
    merge_kwargs = _kwargs_named(captured, "stylefusion.fusion.merge:")
    attributes = [
        typ.cast("str", kwargs["name"]).split(":", 1)[1] for kwargs in merge_kwargs
    ]
    assert attributes == [
        "tone",
        "formality",
        "sentence_length",
        "vocabulary",
        "avoidance",
    ], f"Expected one merge task per attribute, got {attributes!r}."
    for index, (attribute, kwargs) in enumerate(
        zip(attributes, merge_kwargs, strict=True), start=1
    ):
        metadata = typ.cast("dict[str, object]", kwargs[TASK_METADATA_KWARG])
        assert metadata == {
            "operation_name": f"stylefusion.fusion.merge.{attribute}",
            "correlation_id": "user-42",
            "priority_hint": index,
        }, f"Unexpected metadata for {attribute!r}: {metadata!r}."
