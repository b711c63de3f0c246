"""femtologging configuration and emit helpers for the fusion engine.

Fusion reports three kinds of events: sources dropped during validation and
values coerced during merging (WARNING), and one summary per completed run
(INFO). The level is chosen once per process, either explicitly or from
``STYLEFUSION_LOG_LEVEL``.

Examples
--------
Configure logging from the environment and report a run:

>>> level, used_default = configure_logging_from_environment()
>>> log_info(get_logger(__name__), "Fused %s sources", 3)
"""

from __future__ import annotations

import enum
import os
import typing as typ
import warnings

from femtologging import basicConfig, get_logger

_LOG_LEVEL_ENV = "STYLEFUSION_LOG_LEVEL"


class LogLevel(enum.StrEnum):
    """Level names understood by femtologging.

    ``WARN`` is accepted for compatibility and normalised to ``WARNING``.
    """

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalise_log_level(level: str | None) -> tuple[LogLevel, bool]:
    """Resolve a requested level name into a supported ``LogLevel``.

    Parameters
    ----------
    level : str | None
        Requested level name in any case, or None.

    Returns
    -------
    tuple[LogLevel, bool]
        The resolved level and whether INFO was substituted because the
        input was missing or unrecognised.
    """
    requested = level.strip().upper() if level else ""
    if requested not in LogLevel.__members__:
        return (LogLevel.INFO, True)
    if requested == LogLevel.WARN:
        warnings.warn(
            "LogLevel.WARN is deprecated; use LogLevel.WARNING instead.",
            DeprecationWarning,
            stacklevel=3,
        )
        return (LogLevel.WARNING, False)
    return (LogLevel(requested), False)


def configure_logging(
    level: str | None, *, force: bool = False
) -> tuple[LogLevel, bool]:
    """Configure femtologging at ``level`` and report what was applied."""
    resolved, used_default = normalise_log_level(level)
    basicConfig(level=resolved, force=force)
    return (resolved, used_default)


def configure_logging_from_environment(
    *, force: bool = False
) -> tuple[LogLevel, bool]:
    """Configure logging from ``STYLEFUSION_LOG_LEVEL``, defaulting to INFO."""
    return configure_logging(os.getenv(_LOG_LEVEL_ENV), force=force)


class _SupportsLog(typ.Protocol):
    """Structural type for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None: ...


def log_at(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Interpolate ``args`` into ``template`` and emit it at ``level``.

    Templates use percent-style placeholders and are only interpolated when
    arguments are supplied, so a literal ``%`` is safe in a bare message.

    Raises
    ------
    TypeError
        If the placeholders and arguments do not line up.
    """
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit an INFO message; see ``log_at``."""
    log_at(logger, LogLevel.INFO, template, *args, exc_info=exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit a WARNING message; see ``log_at``."""
    log_at(logger, LogLevel.WARNING, template, *args, exc_info=exc_info)


__all__ = (
    "LogLevel",
    "configure_logging",
    "configure_logging_from_environment",
    "get_logger",
    "log_at",
    "log_info",
    "log_warning",
    "normalise_log_level",
)
