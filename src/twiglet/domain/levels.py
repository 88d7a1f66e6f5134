"""Severity tags and their ordering.

The wire tags follow the classic five-level ladder ``debug < info < warn <
error < fatal``. ``warning`` and ``critical`` are accepted as aliases so code
written against the standard library names keeps working.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

from .errors import InvalidLevelError


class Level(IntEnum):
    """Ordered severities; the integer value doubles as the threshold rank."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @property
    def tag(self) -> str:
        """Lower-case tag written to ``log.level``."""

        return self.name.lower()


_ALIASES: Final[dict[str, Level]] = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "fatal": Level.FATAL,
    "critical": Level.FATAL,
}


def resolve_level(value: str | int | Level) -> Level:
    """Return the :class:`Level` named or numbered by *value*.

    Examples
    --------
    >>> resolve_level("warning") is Level.WARN
    True
    >>> resolve_level(4).tag
    'fatal'
    """

    if isinstance(value, Level):
        return value
    if isinstance(value, bool):
        raise InvalidLevelError(f"Unknown log level: {value!r}")
    if isinstance(value, int):
        try:
            return Level(value)
        except ValueError as exc:
            raise InvalidLevelError(f"Unknown log level: {value!r}") from exc
    if isinstance(value, str):
        try:
            return _ALIASES[value.strip().lower()]
        except KeyError as exc:
            raise InvalidLevelError(f"Unknown log level: {value!r}") from exc
    raise InvalidLevelError(f"Unknown log level: {value!r}")
