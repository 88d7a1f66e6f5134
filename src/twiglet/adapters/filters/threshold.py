"""Severity threshold adapter.

Purpose
-------
Implement the :class:`twiglet.application.ports.SeverityFilter` protocol with
the classic "minimum level" rule: events below the configured threshold are
dropped before any message is built.

Key behaviours
--------------
* Accepts level names, the ``warning``/``critical`` aliases, or integers
  ``0`` (debug) to ``4`` (fatal).
* The threshold may be changed after construction; derived loggers sharing
  the filter see the change immediately.
"""

from __future__ import annotations

from ...domain.levels import Level, resolve_level


class ThresholdFilter:
    """Allow levels at or above a configurable threshold.

    Examples
    --------
    >>> flt = ThresholdFilter("warn")
    >>> flt.allows("info"), flt.allows("error")
    (False, True)
    >>> flt.level = "debug"
    >>> flt.level
    0
    """

    def __init__(self, level: str | int | Level = Level.DEBUG) -> None:
        self._threshold = resolve_level(level)

    @property
    def level(self) -> int:
        """Current threshold as its integer rank."""

        return int(self._threshold)

    @level.setter
    def level(self, value: str | int | Level) -> None:
        self._threshold = resolve_level(value)

    def allows(self, level: str | int | Level) -> bool:
        """Return ``True`` when *level* is at or above the threshold."""

        return resolve_level(level) >= self._threshold
