"""Shared coercion helpers for loosely typed analyser output and configuration."""

from __future__ import annotations

import enum
import math
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_COERCE_NUMBER_ERRORS = (TypeError, ValueError, OverflowError)

_EnumT = typ.TypeVar("_EnumT", bound=enum.StrEnum)


def coerce_float(value: object, default: float) -> float:
    """Coerce ``value`` to a finite ``float`` and return ``default`` on failure.

    Parameters
    ----------
    value : object
        Candidate value. Only ``int``, ``float``, and ``str`` values are
        conversion candidates; booleans and other types use ``default``.
    default : float
        Fallback returned when conversion is not possible.

    Returns
    -------
    float
        Converted value, or ``default`` when conversion fails or the result
        is NaN or infinite.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        converted = float(value)
    except _COERCE_NUMBER_ERRORS:
        return default
    return converted if math.isfinite(converted) else default


def coerce_int(value: object, default: int) -> int:
    """Coerce ``value`` to ``int`` (truncating floats), or return ``default``."""
    converted = coerce_float(value, math.nan)
    if math.isnan(converted):
        return default
    return int(converted)


def coerce_word_count(value: object) -> int | None:
    """Return a non-negative word count, or ``None`` when it is unknown.

    Negative, non-numeric, and non-finite inputs are treated as unknown.
    """
    if value is None:
        return None
    converted = coerce_float(value, math.nan)
    if math.isnan(converted) or converted < 0:
        return None
    return int(converted)


def coerce_terms(value: object) -> tuple[str, ...] | None:
    """Return the string entries of a term sequence in their original order.

    A bare string is treated as a one-element list. Non-string and blank
    entries are dropped, as are repeats of an earlier entry. ``None`` and
    non-sequence values yield ``None``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        candidates: cabc.Iterable[object] = (value,)
    elif isinstance(value, (list, tuple)):
        candidates = typ.cast("cabc.Iterable[object]", value)
    else:
        return None
    seen: dict[str, None] = {}
    for entry in candidates:
        if isinstance(entry, str) and entry.strip():
            seen.setdefault(entry, None)
    return tuple(seen)


def coerce_category(
    value: object,
    enum_type: type[_EnumT],
    default: _EnumT,
) -> tuple[_EnumT, bool]:
    """Map a raw categorical value onto ``enum_type``.

    Matching ignores case and surrounding whitespace.

    Returns
    -------
    tuple[_EnumT, bool]
        The matched member (or ``default``) and whether the default was
        substituted.
    """
    if isinstance(value, str):
        candidate = value.strip().lower()
        for member in enum_type:
            if member.value == candidate:
                return (member, False)
    return (default, True)
