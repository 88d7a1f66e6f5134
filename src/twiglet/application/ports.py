"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the logger facade relies on so clocks, sinks
and severity filters can be swapped without touching the merge engine.

Contents
--------
* :class:`Clock` – zero-argument callable returning the current instant.
* :class:`Sink` – receives one serialised line per event.
* :class:`SeverityFilter` – decides whether a level reaches the entry builder.

System Role
-----------
Default implementations live under :mod:`twiglet.adapters`. The protocols are
runtime checkable so contract tests can assert conformance directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Return the current instant; naive values are read as UTC."""

    def __call__(self) -> datetime:
        """Return the current time."""


@runtime_checkable
class Sink(Protocol):
    """Destination for serialised log lines.

    Why
    ----
    The core only ever writes whole lines; keeping them atomic under
    concurrent callers is the sink's job.
    """

    def write_line(self, line: str) -> None:
        """Write *line* followed by a single newline; failures propagate."""


@runtime_checkable
class SeverityFilter(Protocol):
    """Optional host collaborator suppressing calls below a threshold."""

    def allows(self, level: str) -> bool:
        """Return ``True`` when events at *level* should be emitted."""
