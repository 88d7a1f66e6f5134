"""Call-site message variants.

Purpose
-------
Resolve the raw value a caller hands to a severity method into one of two
validated shapes, exactly once, at the API boundary.

Contents
--------
* :class:`TextMessage` – plain text, wrapped into ``{"message": text}``.
* :class:`StructuredMessage` – property map carrying a ``message`` field.
* :data:`Message` – union of both variants.
* :func:`coerce_message` – the only place that inspects raw message types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import EmptyMessageError, InvalidMessageTypeError, MissingMessageFieldError

MESSAGE_KEY = "message"


@dataclass(frozen=True, slots=True)
class TextMessage:
    """A plain text message."""

    text: str

    def as_properties(self) -> dict[str, Any]:
        return {MESSAGE_KEY: self.text}


@dataclass(frozen=True, slots=True)
class StructuredMessage:
    """A property map with string top-level keys and a non-empty ``message``."""

    fields: Mapping[str, Any]

    @property
    def text(self) -> str:
        return self.fields[MESSAGE_KEY]

    def as_properties(self) -> dict[str, Any]:
        return dict(self.fields)


Message = Union[TextMessage, StructuredMessage]


def coerce_message(raw: Any) -> Message:
    """Validate *raw* and return the matching :data:`Message` variant.

    Why
    ----
    Every event must carry a non-empty string message. Checking once here
    keeps the entry builder free of type inspection.

    What
    ----
    * ``str`` becomes :class:`TextMessage`.
    * Any mapping becomes :class:`StructuredMessage`; top-level keys are
      coerced to ``str`` so ``{"message": ...}`` is found whatever key type the
      caller used.
    * Existing variants are returned unchanged.

    Raises
    ------
    EmptyMessageError
        When the text (or the ``message`` field) is blank after trimming.
    MissingMessageFieldError
        When a mapping has no ``message`` key.
    InvalidMessageTypeError
        When *raw* is neither text nor a mapping, the ``message`` field is
        not a string, or a dotted key such as ``"message.detail"`` would
        replace it with an object.

    Examples
    --------
    >>> coerce_message("hello")
    TextMessage(text='hello')
    >>> coerce_message({"message": "hi", "pet.name": "Barker"}).text
    'hi'
    """

    if isinstance(raw, (TextMessage, StructuredMessage)):
        return raw
    if isinstance(raw, str):
        _require_text(raw)
        return TextMessage(raw)
    if isinstance(raw, Mapping):
        fields = {str(key): value for key, value in raw.items()}
        if MESSAGE_KEY not in fields:
            raise MissingMessageFieldError("Log object must have a 'message' property")
        text = fields[MESSAGE_KEY]
        if not isinstance(text, str):
            raise InvalidMessageTypeError(
                f"The 'message' property of log object must be a string, got {type(text).__name__}"
            )
        _require_text(text)
        _reject_message_paths(fields)
        return StructuredMessage(fields)
    raise InvalidMessageTypeError(f"Message must be a string or a mapping, got {type(raw).__name__}")


def _require_text(text: str) -> None:
    if not text.strip():
        raise EmptyMessageError("The 'message' property of log object must not be empty")


def _reject_message_paths(fields: Mapping[str, Any]) -> None:
    prefix = MESSAGE_KEY + "."
    for key in fields:
        if key.startswith(prefix):
            raise InvalidMessageTypeError(
                f"Key {key!r} would turn the 'message' property into an object"
            )
