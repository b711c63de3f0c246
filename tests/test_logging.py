"""Unit tests for the femtologging wrapper."""

from __future__ import annotations

import pytest

from stylefusion import logging as stylefusion_logging
from stylefusion.logging import (
    LogLevel,
    configure_logging,
    configure_logging_from_environment,
    log_at,
    log_info,
    log_warning,
    normalise_log_level,
)


class _RecordingLogger:
    """Capture emitted records instead of writing them anywhere."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None:
        del exc_info, stack_info
        self.records.append((level, message))


@pytest.fixture
def recorded_configs(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Replace femtologging's basicConfig with a recorder."""
    calls: list[dict[str, object]] = []

    def _basic_config(**kwargs: object) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(stylefusion_logging, "basicConfig", _basic_config)
    return calls


@pytest.mark.parametrize(
    ("requested", "expected", "used_default"),
    [
        ("debug", LogLevel.DEBUG, False),
        (" error ", LogLevel.ERROR, False),
        (None, LogLevel.INFO, True),
        ("", LogLevel.INFO, True),
        ("loud", LogLevel.INFO, True),
    ],
)
def test_normalise_log_level(
    requested: str | None, expected: LogLevel, *, used_default: bool
) -> None:
    """Level names are case-insensitive and bad input falls back to INFO."""
    assert normalise_log_level(requested) == (expected, used_default), (
        f"Unexpected normalisation of {requested!r}."
    )


def test_warn_is_deprecated() -> None:
    """WARN maps to WARNING with a deprecation warning."""
    with pytest.warns(DeprecationWarning, match="WARN is deprecated"):
        level, used_default = normalise_log_level("warn")

    assert level is LogLevel.WARNING, "Expected WARN to map to WARNING."
    assert not used_default, "Expected WARN to count as an explicit level."


def test_configure_logging_passes_the_level(
    recorded_configs: list[dict[str, object]],
) -> None:
    """The normalised level reaches femtologging."""
    result = configure_logging("debug", force=True)

    assert result == (LogLevel.DEBUG, False), f"Unexpected result {result!r}."
    assert recorded_configs == [{"level": LogLevel.DEBUG, "force": True}], (
        f"Unexpected basicConfig calls: {recorded_configs!r}."
    )


def test_configure_logging_reads_the_environment(
    monkeypatch: pytest.MonkeyPatch,
    recorded_configs: list[dict[str, object]],
) -> None:
    """STYLEFUSION_LOG_LEVEL selects the level."""
    monkeypatch.setenv("STYLEFUSION_LOG_LEVEL", "error")

    level, used_default = configure_logging_from_environment()

    assert level is LogLevel.ERROR, "Expected the environment level."
    assert not used_default, "Expected the environment value to be used."
    assert recorded_configs[0]["level"] is LogLevel.ERROR, (
        "Expected femtologging to receive the environment level."
    )


def test_helpers_format_percent_templates() -> None:
    """log_info and log_warning format their templates before emitting."""
    logger = _RecordingLogger()

    log_info(logger, "Fused %s sources", 3)
    log_warning(logger, "Dropped %r", "article")
    log_info(logger, "100% literal")

    assert logger.records == [
        (LogLevel.INFO, "Fused 3 sources"),
        (LogLevel.WARNING, "Dropped 'article'"),
        (LogLevel.INFO, "100% literal"),
    ], f"Unexpected records: {logger.records!r}."


def test_mismatched_template_raises() -> None:
    """A template that does not match its arguments is a programming error."""
    logger = _RecordingLogger()

    with pytest.raises(TypeError):
        log_info(logger, "No placeholders", "extra")


def test_log_at_forwards_level_and_exception_info() -> None:
    """Explicit levels and exception info reach the logger unchanged."""
    seen: list[tuple[str, str, object]] = []

    class _Logger:
        def log(
            self,
            level: str,
            message: str,
            /,
            *,
            exc_info: object | None = None,
            stack_info: bool = False,
        ) -> None:
            del stack_info
            seen.append((level, message, exc_info))

    error = ValueError("bad weight")
    log_at(_Logger(), LogLevel.ERROR, "Merger %s failed", "tone", exc_info=error)

    assert seen == [(LogLevel.ERROR, "Merger tone failed", error)], (
        f"Unexpected records: {seen!r}."
    )
