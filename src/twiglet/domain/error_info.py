"""Structured error details attached to ``error``/``fatal`` events."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Message and optional stack trace taken from a raised error.

    ``stack_trace`` is ``None`` when the error was never raised (it has no
    traceback); the entry builder then omits ``error.stack_trace`` entirely.

    Examples
    --------
    >>> ErrorInfo.from_exception(ValueError("Connection timed-out"))
    ErrorInfo(message='Connection timed-out', stack_trace=None)
    """

    message: str
    stack_trace: tuple[str, ...] | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorInfo:
        """Build an :class:`ErrorInfo` from *exc* and its traceback, if any.

        The message falls back to the exception class name when ``str(exc)``
        is empty.
        """

        message = str(exc) or type(exc).__name__
        if exc.__traceback__ is None:
            return cls(message)
        frames = traceback.format_tb(exc.__traceback__)
        return cls(message, tuple(frame.rstrip("\n") for frame in frames))

    @classmethod
    def coerce(cls, error: Any) -> ErrorInfo:
        """Accept an :class:`ErrorInfo`, an exception, or any object exposing
        a ``message`` string and optionally a ``stack_trace`` string.

        Examples
        --------
        >>> class Failure:
        ...     message = "divided by 0"
        ...     stack_trace = "app.py:3\\napp.py:9"
        >>> ErrorInfo.coerce(Failure())
        ErrorInfo(message='divided by 0', stack_trace=('app.py:3', 'app.py:9'))
        """

        if isinstance(error, ErrorInfo):
            return error
        if isinstance(error, BaseException):
            return cls.from_exception(error)
        message = getattr(error, "message", None)
        if not isinstance(message, str):
            raise TypeError(f"error must expose a 'message' string, got {type(error).__name__}")
        stack_trace = getattr(error, "stack_trace", None)
        if isinstance(stack_trace, str) and stack_trace:
            return cls(message, tuple(stack_trace.splitlines()))
        return cls(message)

    def as_properties(self) -> dict[str, Any]:
        """Return ``{"error": {...}}`` ready to be merged under a message."""

        details: dict[str, Any] = {"message": self.message}
        if self.stack_trace:
            details["stack_trace"] = "\n".join(self.stack_trace)
        return {"error": details}
