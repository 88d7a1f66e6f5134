"""Application-layer merge policy.

Purpose
-------
Combine property maps into one nested mapping with deterministic precedence.
Used both to assemble events (envelope, scoped context, call-site message)
and to fold dotted-key contributions during normalisation. Free of I/O.

Contents
    - ``deep_merge``: two-way merge, the second argument wins.
    - ``merge_layers``: left-to-right fold over any number of mappings.
    - ``_merge_mapping`` / ``_merge_branch`` / ``_copy_value``: recursive
      stanzas that keep the precedence rules readable.

System Role
-----------
Called by :mod:`twiglet.application.normalize` and
:mod:`twiglet.application.entry`. Because scoped contexts are reused across
many emissions, neither input is ever mutated and every mapping in the result
is a fresh ``dict``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable


def deep_merge(base: Mapping[Any, Any], override: Mapping[Any, Any]) -> dict[Any, Any]:
    """Merge *override* onto *base* and return a new nested ``dict``.

    Why
    ----
    Later layers must refine earlier ones without discarding sibling fields:
    ``{"service": {"name": ...}}`` plus ``{"service": {"type": ...}}`` keeps
    both names.

    What
    ----
    * Keys found in one input only are copied.
    * Keys found in both are merged recursively when both values are
      mappings; otherwise the *override* value replaces the *base* value
      outright (a scalar discards a mapping and vice versa).

    Side Effects
    ------------
    None; operates on copies of the provided mappings.

    Examples
    --------
    >>> deep_merge({"http": {"request": {"method": "get"}}}, {"http": {"response": {"status_code": 200}}})
    {'http': {'request': {'method': 'get'}, 'response': {'status_code': 200}}}
    >>> deep_merge({"name": "petshop", "id": 1}, {"name": "petstore"})
    {'name': 'petstore', 'id': 1}
    """

    merged = _copy_mapping(base)
    _merge_mapping(merged, override)
    return merged


def merge_layers(layers: Iterable[Mapping[Any, Any]]) -> dict[Any, Any]:
    """Fold *layers* (lowest precedence first) with :func:`deep_merge`.

    Examples
    --------
    >>> merge_layers([{"log": {"level": "info"}}, {"trace": {"id": "abc"}}, {"log": {"level": "warn"}}])
    {'log': {'level': 'warn'}, 'trace': {'id': 'abc'}}
    """

    merged: dict[Any, Any] = {}
    for layer in layers:
        _merge_mapping(merged, layer)
    return merged


def _merge_mapping(target: dict[Any, Any], incoming: Mapping[Any, Any]) -> None:
    """Recursively merge ``incoming`` into the fresh ``target`` in place."""

    for key, value in incoming.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_branch(target, key, existing, value)
        else:
            target[key] = _copy_value(value)


def _merge_branch(target: dict[Any, Any], key: Any, existing: dict[Any, Any], value: Mapping[Any, Any]) -> None:
    """Merge mapping ``value`` into ``target[key]`` (already a private copy)."""

    _merge_mapping(existing, value)
    target[key] = existing


def _copy_mapping(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    return {key: _copy_value(value) for key, value in mapping.items()}


def _copy_value(value: Any) -> Any:
    """Clone nested mappings into ``dict``, including those held in lists and tuples."""

    if isinstance(value, Mapping):
        return _copy_mapping(value)
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_copy_value(item) for item in value)
    return value
