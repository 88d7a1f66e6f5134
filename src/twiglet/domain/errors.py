"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the entry builder, the logger
facade, and consuming applications. Every failure is a programmer or input
error: nothing is retried and nothing is caught internally.

Contents
--------
* :class:`TwigletError` – umbrella base class for all library failures.
* :class:`MissingServiceNameError` – logger constructed without a service name.
* :class:`InvalidMessageTypeError` – message is neither text nor a mapping.
* :class:`MissingMessageFieldError` – structured message lacks ``message``.
* :class:`EmptyMessageError` – message is blank after trimming.
* :class:`InvalidLevelError` – unknown severity name or number.

System Role
-----------
Raised synchronously to the immediate caller of a construction or emission
call. A raised error means no line reached the sink.
"""

from __future__ import annotations


class TwigletError(Exception):
    """Base type for all exceptions emitted by ``twiglet``.

    Why
    ----
    Provide a single catch-all type for callers that treat every emission as
    fallible but do not need fine-grained handling.
    """


class MissingServiceNameError(TwigletError):
    """Raised when a logger is created with an empty or blank service name."""


class InvalidMessageTypeError(TwigletError):
    """Raised when a message is neither a string nor a structured mapping.

    Also covers structured messages whose ``message`` field is not a string.
    """


class MissingMessageFieldError(TwigletError):
    """Raised when a structured message has no ``message`` key."""


class EmptyMessageError(TwigletError):
    """Raised when the message text is empty after trimming whitespace.

    Applies to plain text messages and to the ``message`` field of structured
    ones alike.
    """


class InvalidLevelError(TwigletError):
    """Raised when a severity name or number does not map to a known level."""
