"""Event assembly.

Purpose
-------
Produce the final, serialisable event for one emission call by layering the
fixed envelope, the logger's scoped context, and the validated call-site
message.

Contents
--------
* :func:`build_entry` – assembly and validation entry point.
* :func:`build_error_fields` – ``error.*`` enrichment from an exception.
* :func:`format_timestamp` – ISO-8601 UTC with millisecond precision.
* :func:`render_line` – compact single-line JSON encoding.

System Role
-----------
Called by :class:`twiglet.logger.Logger` for every severity method. The
builder never writes to a sink; its only side effect is calling the clock.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from ..domain.error_info import ErrorInfo
from ..domain.errors import TwigletError
from ..domain.message import coerce_message
from ..observability import log_debug, make_event
from .merge import deep_merge
from .normalize import to_nested


def build_entry(
    level: str,
    message: Any,
    *,
    service_name: str,
    context: Mapping[Any, Any],
    now: Callable[[], datetime],
    error: ErrorInfo | BaseException | None = None,
) -> dict[Any, Any]:
    """Return the assembled event for one emission.

    Why
    ----
    Precedence between the three layers must be identical for every call:
    envelope, then scoped context, then the call-site message.

    What
    ----
    1. Validates *message* via :func:`twiglet.domain.message.coerce_message`.
    2. When *error* is given, merges the message over the ``error.*``
       enrichment, so caller-supplied ``error`` fields win.
    3. Normalises the context and the message layer and deep-merges them onto
       the envelope.

    Parameters
    ----------
    level:
        Lower-case severity tag written to ``log.level``.
    message:
        Raw text, mapping, or an already coerced message variant.
    service_name:
        Value for ``service.name``.
    context:
        Scoped properties; dotted keys allowed.
    now:
        Clock; called exactly once, after validation succeeds.
    error:
        Optional exception or :class:`ErrorInfo` for enrichment.

    Raises
    ------
    EmptyMessageError, MissingMessageFieldError, InvalidMessageTypeError
        Propagated from message validation.

    Examples
    --------
    >>> from datetime import datetime
    >>> build_entry(
    ...     "error",
    ...     {"message": "Out of pets exception"},
    ...     service_name="petshop",
    ...     context={},
    ...     now=lambda: datetime(2020, 5, 11, 15, 1, 1),
    ... )
    {'@timestamp': '2020-05-11T15:01:01.000Z', 'service': {'name': 'petshop'}, 'log': {'level': 'error'}, 'message': 'Out of pets exception'}
    """

    try:
        resolved = coerce_message(message)
    except TwigletError as exc:
        log_debug("entry_rejected", **make_event(service_name, level, {"reason": type(exc).__name__}))
        raise

    message_layer: Mapping[Any, Any] = resolved.as_properties()
    if error is not None:
        message_layer = deep_merge(build_error_fields(error), message_layer)

    envelope = {
        "@timestamp": format_timestamp(now()),
        "service": {"name": service_name},
        "log": {"level": level},
    }
    return deep_merge(deep_merge(envelope, to_nested(context)), to_nested(message_layer))


def build_error_fields(error: ErrorInfo | BaseException) -> dict[str, Any]:
    """Return ``{"error": {"message": ..., "stack_trace": ...}}`` for *error*.

    ``stack_trace`` is left out when the error carries no trace.

    Examples
    --------
    >>> build_error_fields(ValueError("divided by 0"))
    {'error': {'message': 'divided by 0'}}
    """

    return ErrorInfo.coerce(error).as_properties()


def format_timestamp(instant: datetime) -> str:
    """Format *instant* as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC already.

    Examples
    --------
    >>> format_timestamp(datetime(2020, 5, 11, 15, 1, 1, 736512))
    '2020-05-11T15:01:01.736Z'
    """

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    else:
        instant = instant.astimezone(timezone.utc)
    return f"{instant:%Y-%m-%dT%H:%M:%S}.{instant.microsecond // 1000:03d}Z"


def render_line(entry: Mapping[Any, Any]) -> str:
    """Serialise *entry* as one line of compact JSON (no trailing newline).

    Values JSON cannot encode natively fall back to ``str()``.

    Examples
    --------
    >>> render_line({"message": "hi", "log": {"level": "info"}})
    '{"message":"hi","log":{"level":"info"}}'
    """

    return json.dumps(entry, separators=(",", ":"), ensure_ascii=False, default=str)
