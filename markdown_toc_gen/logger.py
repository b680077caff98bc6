"""Leveled, colored console logging injected into the TOC pipeline."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

import click


class LogLevel(IntEnum):
    """Verbosity levels, lowest value is the most severe.

    Attributes:
        ERROR: Failures that prevented a file from being processed.
        WARN: Recoverable problems the user should act on.
        INFO: Per-file outcomes and batch summaries.
        DEBUG: Pipeline traces.
    """

    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


LogFunc = Callable[[LogLevel, str], None]

LOG_LEVEL_NAMES = {
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "info": LogLevel.INFO,
    "debug": LogLevel.DEBUG,
}

_COLORS = {
    LogLevel.ERROR: "red",
    LogLevel.WARN: "yellow",
    LogLevel.INFO: "blue",
    LogLevel.DEBUG: "bright_black",
}


def null_log(level: LogLevel, message: str) -> None:
    """Discard a log message."""


def parse_log_level(name: str | LogLevel) -> LogLevel:
    """Resolve a level name such as ``"warn"`` into a `LogLevel`.

    Raises:
        ValueError: If the name is not a known level.
    """
    if isinstance(name, LogLevel):
        return name
    try:
        return LOG_LEVEL_NAMES[name.lower()]
    except (AttributeError, KeyError) as error:
        raise ValueError(
            f"Unknown log level {name!r} (expected one of: {', '.join(LOG_LEVEL_NAMES)})"
        ) from error


class Logger:
    """Console logger usable wherever a `LogFunc` is expected.

    Messages above the configured verbosity are dropped. Errors and warnings go
    to stderr, everything else to stdout.

    Examples:
        log = Logger("debug")
        log(LogLevel.DEBUG, "scanning markers")
        log.success("README.md updated")
    """

    def __init__(self, level: str | LogLevel = LogLevel.INFO):
        self.level = parse_log_level(level)

    def __call__(self, level: LogLevel, message: str) -> None:
        self._emit(level, message, _COLORS[level])

    def _emit(self, level: LogLevel, message: str, color: str) -> None:
        if level > self.level:
            return
        click.secho(message, fg=color, err=level <= LogLevel.WARN)

    def error(self, message: str) -> None:
        self(LogLevel.ERROR, message)

    def warn(self, message: str) -> None:
        self(LogLevel.WARN, message)

    def info(self, message: str) -> None:
        self(LogLevel.INFO, message)

    def success(self, message: str) -> None:
        self._emit(LogLevel.INFO, message, "green")

    def debug(self, message: str) -> None:
        self(LogLevel.DEBUG, message)
