"""Metadata-aware task creation for fan-out inside task groups.

The concurrent fusion path forks one task per attribute merger. Each task can
carry a small metadata payload (operation name, correlation id, priority
hint) that a custom event-loop task factory may consume; when no factory is
installed the metadata is dropped and plain tasks are created.
"""

from __future__ import annotations

import asyncio
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

TASK_METADATA_KWARG = "stylefusion_task_metadata"
_STRING_FIELDS = ("operation_name", "correlation_id")
_TASK_METADATA_KEYS = frozenset({*_STRING_FIELDS, "priority_hint"})


class TaskMetadata(typ.TypedDict, total=False):
    """Optional metadata forwarded to a task factory."""

    operation_name: str
    correlation_id: str
    priority_hint: int


def validate_task_metadata(metadata: TaskMetadata) -> TaskMetadata | None:
    """Check metadata shape and drop empty payloads.

    Parameters
    ----------
    metadata : TaskMetadata
        Candidate metadata mapping.

    Returns
    -------
    TaskMetadata | None
        The validated metadata, or ``None`` when no field was set.

    Raises
    ------
    ValueError
        If unknown keys are present or a string field is empty.
    TypeError
        If a field has the wrong type.
    """
    unsupported = set(metadata) - _TASK_METADATA_KEYS
    if unsupported:
        keys = ", ".join(sorted(repr(key) for key in unsupported))
        msg = f"Unsupported task metadata keys: {keys}"
        raise ValueError(msg)

    validated: TaskMetadata = {}
    for field_name in _STRING_FIELDS:
        value = metadata.get(field_name)
        if value is None:
            continue
        if not isinstance(value, str):
            msg = (
                f"Task metadata {field_name!r} must be a string, "
                f"got {type(value).__name__!r}."
            )
            raise TypeError(msg)
        if not value:
            msg = f"Task metadata {field_name!r} must be a non-empty string."
            raise ValueError(msg)
        validated[field_name] = value

    priority_hint = metadata.get("priority_hint")
    if priority_hint is not None:
        if isinstance(priority_hint, bool) or not isinstance(priority_hint, int):
            msg = "Task metadata 'priority_hint' must be an integer."
            raise TypeError(msg)
        validated["priority_hint"] = priority_hint

    return validated or None


def create_task_in_group[T](
    task_group: asyncio.TaskGroup,
    coro: cabc.Coroutine[object, object, T],
    /,
    *,
    name: str | None = None,
    metadata: TaskMetadata | None = None,
) -> asyncio.Task[T]:
    """Create a task in ``task_group``, forwarding metadata to a task factory."""
    validated = validate_task_metadata(metadata) if metadata is not None else None
    loop = asyncio.get_running_loop()
    if validated is None or loop.get_task_factory() is None:
        return task_group.create_task(coro, name=name)
    creator = typ.cast("typ.Callable[..., asyncio.Task[T]]", task_group.create_task)
    return creator(coro, name=name, **{TASK_METADATA_KWARG: validated})


__all__ = [
    "TASK_METADATA_KWARG",
    "TaskMetadata",
    "create_task_in_group",
    "validate_task_metadata",
]
