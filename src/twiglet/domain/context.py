"""Domain-level scoped context value object.

Purpose
-------
Anchor the immutable :class:`ScopedContext` that carries a logger's default
properties into every event it emits. The module contains no I/O.

Contents
--------
* :class:`ScopedContext` – ``Mapping`` implementation with dotted-path lookup
  and a mutable export helper.
* :func:`thaw` – recursive clone that turns any nested mapping into plain
  ``dict`` objects.
* :data:`EMPTY_CONTEXT` – canonical empty instance used by fresh loggers.

System Role
-----------
A context is created once per logger (at construction or via
:meth:`twiglet.logger.Logger.with_properties`) and then shared by reference
between emission calls. Freezing it up front is what makes those concurrent
reads safe without locking.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator


@dataclass(frozen=True, slots=True, eq=False)
class ScopedContext(Mapping[Any, Any]):
    """Immutable property map attached to a logger instance.

    Why
    ----
    The same context is merged into many events. Any accidental mutation
    would leak fields into unrelated log lines, so the value is frozen all the
    way down.

    What
    ----
    Stores the supplied properties inside nested ``MappingProxyType``
    instances. Keys are kept exactly as given (dotted keys included); they are
    normalised per emission by :func:`twiglet.application.normalize.to_nested`.

    Examples
    --------
    >>> ctx = ScopedContext({"trace": {"id": "abc"}, "event.action": "buy"})
    >>> ctx.get("trace.id")
    'abc'
    >>> ctx["event.action"]
    'buy'
    """

    _data: Mapping[Any, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_data", _freeze_mapping(self._data))

    def __getitem__(self, key: Any) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value stored under *key*, resolving dotted paths.

        A literal key wins over a dotted path with the same spelling.

        Examples
        --------
        >>> ScopedContext({"a": {"b": 1}}).get("a.b")
        1
        >>> ScopedContext({}).get("missing", "fallback")
        'fallback'
        """

        if key in self._data:
            return self._data[key]
        if not isinstance(key, str):
            return default
        return _resolve_dotted_path(self._data, key, default)

    def as_dict(self) -> dict[Any, Any]:
        """Return a deep, mutable ``dict`` copy of the context."""

        return thaw(self._data)

    @classmethod
    def coerce(cls, properties: Mapping[Any, Any] | None) -> ScopedContext:
        """Return *properties* as a context, reusing existing instances."""

        if isinstance(properties, ScopedContext):
            return properties
        if not properties:
            return EMPTY_CONTEXT
        return cls(properties)


def thaw(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    """Recursively clone *mapping* into plain ``dict`` objects.

    Lists and tuples are copied element-wise so nested mappings inside them are
    thawed as well; other values are shared.

    Examples
    --------
    >>> frozen = MappingProxyType({"a": MappingProxyType({"b": 1})})
    >>> thaw(frozen)
    {'a': {'b': 1}}
    """

    return {key: _thaw_value(value) for key, value in mapping.items()}


def _thaw_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return thaw(value)
    if isinstance(value, list):
        return [_thaw_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_thaw_value(item) for item in value)
    return value


def _freeze_mapping(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Return a read-only proxy around a recursively frozen copy of *mapping*."""

    return MappingProxyType({key: _freeze_value(value) for key, value in mapping.items()})


def _freeze_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _freeze_mapping(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(item) for item in value)
    return value


def _resolve_dotted_path(source: Mapping[Any, Any], dotted: str, default: Any) -> Any:
    """Resolve *dotted* within *source*, returning *default* when missing."""

    current: Any = source
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


EMPTY_CONTEXT = ScopedContext(MappingProxyType({}))
"""Shared empty context; safe to reuse because :class:`ScopedContext` is immutable."""
