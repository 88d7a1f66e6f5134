"""Dotted-key normalisation.

Purpose
    Turn flat property maps such as ``{"http.response.status_code": 200}`` into
    the nested shape ``{"http": {"response": {"status_code": 200}}}`` that the
    wire format expects.

Contents
    - ``PATH_SEPARATOR``: the default path separator (``"."``).
    - ``contains_dotted_key``: cheap check driving the identity fast path.
    - ``to_nested``: the normaliser.

Precedence
    Keys without the separator are applied first, dotted keys second; inside
    each group the input order holds and later keys win on leaf conflicts.
    ``{"pet.name": "Rex", "pet": {"name": "Barker"}}`` therefore yields
    ``{"pet": {"name": "Rex"}}`` whichever order the two keys were written in.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from .merge import _merge_mapping

PATH_SEPARATOR: Final[str] = "."


def contains_dotted_key(properties: Mapping[Any, Any], separator: str = PATH_SEPARATOR) -> bool:
    """Return ``True`` when any string key of *properties* holds *separator*."""

    return any(isinstance(key, str) and separator in key for key in properties)


def to_nested(properties: Mapping[Any, Any], separator: str = PATH_SEPARATOR) -> Mapping[Any, Any]:
    """Expand dotted keys of *properties* into nested mappings.

    Why
    ----
    Callers may describe a field either as a path (``"trace.id"``) or as
    nested maps (``{"trace": {"id": ...}}``); events must only ever contain the
    nested form.

    What
    ----
    Returns *properties* itself when no key contains *separator*. Otherwise
    builds ``{s1: {s2: ... {sn: value}}}`` for every key and deep-merges the
    contributions into a new ``dict``. Only the top level is inspected and
    non-string keys are never split.

    Examples
    --------
    >>> to_nested({"trace.id": "abc", "pet.name": "Barker", "message": "bought a dog"})
    {'message': 'bought a dog', 'trace': {'id': 'abc'}, 'pet': {'name': 'Barker'}}
    >>> plain = {"service": {"name": "petshop"}}
    >>> to_nested(plain) is plain
    True
    """

    if not contains_dotted_key(properties, separator):
        return properties

    plain: list[tuple[Any, Any]] = []
    dotted: list[tuple[str, Any]] = []
    for key, value in properties.items():
        if isinstance(key, str) and separator in key:
            dotted.append((key, value))
        else:
            plain.append((key, value))

    nested: dict[Any, Any] = {}
    for key, value in plain:
        _merge_mapping(nested, {key: value})
    for key, value in dotted:
        _merge_mapping(nested, _build_nested_object(key.split(separator), value))
    return nested


def _build_nested_object(segments: list[str], value: Any) -> dict[str, Any]:
    """Wrap *value* in one single-key ``dict`` per segment, innermost last.

    Examples
    --------
    >>> _build_nested_object(["http", "request", "method"], "get")
    {'http': {'request': {'method': 'get'}}}
    """

    nested: Any = value
    for segment in reversed(segments):
        nested = {segment: nested}
    return nested
