"""Logger facade.

Purpose
-------
Public entry point: one method per severity, each turning a message into one
JSON line on the configured sink.

Contents
--------
* :class:`Logger` – severity methods, ``with_properties`` derivation, and the
  generic :meth:`Logger.log`.

System Role
-----------
Holds the service name, the scoped context, the clock, the sink and the
optional severity filter, and delegates assembly to
:func:`twiglet.application.entry.build_entry`. Calls are synchronous: when a
method returns, its line has been written (or an error was raised and nothing
was written).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, TextIO

from .adapters.clock.default import utc_now
from .adapters.sinks.stream import StreamSink
from .application.entry import build_entry, render_line
from .application.ports import SeverityFilter, Sink
from .domain.context import ScopedContext
from .domain.error_info import ErrorInfo
from .domain.errors import MissingServiceNameError
from .domain.levels import Level, resolve_level
from .observability import log_debug, log_error, make_event

ErrorLike = ErrorInfo | BaseException


class Logger:
    """Structured JSON logger bound to one service.

    Why
    ----
    Every event needs the same envelope and the same default properties; the
    facade keeps those in one place and makes derived loggers cheap.

    Parameters
    ----------
    service_name:
        Written to ``service.name``; must be a non-blank string.
    default_properties:
        Scoped properties merged into every event (dotted keys allowed).
    now:
        Clock returning the current instant.
    output:
        Text stream wrapped in a :class:`StreamSink` (``sys.stdout`` when
        omitted). Ignored when *sink* is given.
    sink:
        Any object with ``write_line(line)``.
    severity_filter:
        Optional threshold collaborator; ``None`` emits every call.

    Raises
    ------
    MissingServiceNameError
        When *service_name* is empty, blank, or not a string.

    Examples
    --------
    >>> import io
    >>> from datetime import datetime
    >>> buffer = io.StringIO()
    >>> logger = Logger("petshop", now=lambda: datetime(2020, 5, 11, 15, 1, 1), output=buffer)
    >>> logger.warn("shop is running low on dog food")
    >>> buffer.getvalue()
    '{"@timestamp":"2020-05-11T15:01:01.000Z","service":{"name":"petshop"},"log":{"level":"warn"},"message":"shop is running low on dog food"}\\n'
    """

    def __init__(
        self,
        service_name: str,
        *,
        default_properties: Mapping[Any, Any] | None = None,
        now: Callable[[], datetime] = utc_now,
        output: TextIO | None = None,
        sink: Sink | None = None,
        severity_filter: SeverityFilter | None = None,
    ) -> None:
        if not isinstance(service_name, str) or not service_name.strip():
            raise MissingServiceNameError("Service name is mandatory")
        self._service_name = service_name
        self._context = ScopedContext.coerce(default_properties)
        self._now = now
        self._sink: Sink = sink if sink is not None else StreamSink(output)
        self._filter = severity_filter

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def context(self) -> ScopedContext:
        """The immutable scoped properties of this logger."""

        return self._context

    @property
    def sink(self) -> Sink:
        return self._sink

    @property
    def severity_filter(self) -> SeverityFilter | None:
        return self._filter

    def with_properties(self, properties: Mapping[Any, Any]) -> Logger:
        """Return a new logger whose scoped context is *properties*.

        The new logger shares the service name, clock, sink and filter. Its
        context replaces this logger's context instead of extending it, and
        this logger is left untouched.

        Examples
        --------
        >>> base = Logger("petshop", default_properties={"event": {"action": "startup"}})
        >>> child = base.with_properties({"trace": {"id": "abc"}})
        >>> dict(child.context.as_dict()), base.context.get("trace.id")
        ({'trace': {'id': 'abc'}}, None)
        """

        derived = Logger(
            self._service_name,
            default_properties=properties,
            now=self._now,
            sink=self._sink,
            severity_filter=self._filter,
        )
        log_debug("logger_derived", **make_event(self._service_name, None, {"keys": sorted(map(str, derived.context))}))
        return derived

    def is_enabled_for(self, level: str | int | Level) -> bool:
        """Return ``True`` when a call at *level* would be emitted."""

        tag = resolve_level(level).tag
        return self._filter is None or self._filter.allows(tag)

    def debug(self, message: Any) -> None:
        self.log(Level.DEBUG, message)

    def info(self, message: Any) -> None:
        self.log(Level.INFO, message)

    def warn(self, message: Any) -> None:
        self.log(Level.WARN, message)

    warning = warn

    def error(self, message: Any, error: ErrorLike | None = None) -> None:
        """Emit an ``error`` event, optionally enriched with *error* details.

        *error* may be an exception, an :class:`ErrorInfo`, or any object with a
        ``message`` string and an optional ``stack_trace`` string.
        """

        self.log(Level.ERROR, message, error)

    def fatal(self, message: Any, error: ErrorLike | None = None) -> None:
        """Emit a ``fatal`` event, optionally enriched with *error* details."""

        self.log(Level.FATAL, message, error)

    critical = fatal

    def log(self, level: str | int | Level, message: Any, error: ErrorLike | None = None) -> None:
        """Build and write one event at *level*.

        *message* may be text, a mapping with a ``message`` key, or a
        zero-argument callable producing either; the callable is only invoked
        when the level passes the severity filter.

        Raises
        ------
        InvalidLevelError
            Unknown *level*.
        EmptyMessageError, MissingMessageFieldError, InvalidMessageTypeError
            Invalid message; nothing is written.
        """

        tag = resolve_level(level).tag
        if self._filter is not None and not self._filter.allows(tag):
            return
        if callable(message):
            message = message()
        entry = build_entry(
            tag,
            message,
            service_name=self._service_name,
            context=self._context,
            now=self._now,
            error=error,
        )
        self._write(tag, render_line(entry))

    def _write(self, tag: str, line: str) -> None:
        try:
            self._sink.write_line(line)
        except Exception as exc:
            log_error("sink_write_failed", **make_event(self._service_name, tag, {"error": repr(exc)}))
            raise
