"""Public package surface for ``twiglet``.

Structured JSON logging: dotted keys become nested fields, scoped properties
are deep-merged under every call-site message, and each call writes exactly
one JSON line.

>>> import io
>>> from datetime import datetime
>>> buffer = io.StringIO()
>>> logger = Logger("petshop", now=lambda: datetime(2020, 5, 11, 15, 1, 1), output=buffer)
>>> logger.with_properties({"trace.id": "abc"}).info({"message": "x"})
>>> buffer.getvalue()
'{"@timestamp":"2020-05-11T15:01:01.000Z","service":{"name":"petshop"},"log":{"level":"info"},"trace":{"id":"abc"},"message":"x"}\\n'
"""

from __future__ import annotations

from .adapters.filters.threshold import ThresholdFilter
from .adapters.sinks.stream import StreamSink
from .application.entry import build_entry, format_timestamp, render_line
from .application.merge import deep_merge, merge_layers
from .application.normalize import PATH_SEPARATOR, to_nested
from .core import create_logger, logger_from_env
from .domain.context import EMPTY_CONTEXT, ScopedContext
from .domain.error_info import ErrorInfo
from .domain.errors import (
    EmptyMessageError,
    InvalidLevelError,
    InvalidMessageTypeError,
    MissingMessageFieldError,
    MissingServiceNameError,
    TwigletError,
)
from .domain.levels import Level
from .logger import Logger
from .observability import get_logger

__all__ = [
    "EMPTY_CONTEXT",
    "EmptyMessageError",
    "ErrorInfo",
    "InvalidLevelError",
    "InvalidMessageTypeError",
    "Level",
    "Logger",
    "MissingMessageFieldError",
    "MissingServiceNameError",
    "PATH_SEPARATOR",
    "ScopedContext",
    "StreamSink",
    "ThresholdFilter",
    "TwigletError",
    "build_entry",
    "create_logger",
    "deep_merge",
    "format_timestamp",
    "get_logger",
    "logger_from_env",
    "merge_layers",
    "render_line",
    "to_nested",
]
