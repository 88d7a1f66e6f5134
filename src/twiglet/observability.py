"""Library diagnostics distilled into tiny orchestration phrases.

Purpose
    Let host applications see why ``twiglet`` rejected an event or failed to
    write one, without the library printing anything on its own.

Contents
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``log_debug`` / ``log_error``: emit structured entries via a single
      private emitter.
    - ``make_event``: convenience builder for structured event payloads.

System Integration
    Used by the entry builder and the logger facade. These records go through
    the standard :mod:`logging` machinery, never through a twiglet sink, so a
    broken sink can still be diagnosed.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger("twiglet")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug diagnostic."""

    _emit(logging.DEBUG, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error diagnostic."""

    _emit(logging.ERROR, message, fields)


def make_event(
    service: str,
    level: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured diagnostic payload for an emission call.

    Examples
    --------
    >>> make_event('petshop', 'info', {'reason': 'empty'})
    {'service': 'petshop', 'level': 'info', 'reason': 'empty'}
    """

    event: dict[str, Any] = {"service": service, "level": level}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a diagnostic through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": dict(fields)})
