"""Environment variable adapter.

Purpose
-------
Translate process environment variables into logger settings so services can
configure ``twiglet`` without code changes.

Key behaviours
--------------
* Enforces a configurable prefix (``default_env_prefix``) so only relevant keys
  are captured (``TWIGLET_SERVICE_NAME``, ``TWIGLET_LEVEL``, ...).
* Supports ``__`` as a nesting delimiter
  (``TWIGLET_PROPERTIES__TRACE__ID`` → ``{"properties": {"trace": {"id": ...}}}``).
* Performs light type coercion for common scalar types (bools, ints, floats,
  ``null``/``none``).
* Emits structured diagnostics via :mod:`twiglet.observability`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('twiglet')
    'TWIGLET'
    >>> default_env_prefix('pet-shop')
    'PET_SHOP'
    """

    return slug.replace("-", "_").upper()


DEFAULT_PREFIX = default_env_prefix("twiglet")


@dataclass(frozen=True)
class LoggerSettings:
    """Logger options read from the environment.

    ``properties`` keeps the nested scoped context; ``level`` is ``None`` when
    no threshold was configured.
    """

    service_name: str | None = None
    level: str | int | None = None
    properties: Mapping[str, Any] = field(default_factory=dict)


class DefaultEnvLoader:
    """Load environment variables that belong to the logger namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str = DEFAULT_PREFIX) -> dict[str, object]:
        """Return a nested mapping containing variables with the supplied *prefix*.

        Returns
        -------
        dict[str, object]
            Nested mapping with lower-case keys.

        Examples
        --------
        >>> env = {
        ...     'TWIGLET_SERVICE_NAME': 'petshop',
        ...     'TWIGLET_PROPERTIES__HTTP__PORT': '8080',
        ... }
        >>> payload = DefaultEnvLoader(environ=env).load()
        >>> payload['properties']['http']['port']
        8080
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if prefix and not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :] if prefix else key
            if not stripped:
                continue
            assign_nested(collected, stripped, _coerce(value))
        log_debug("env_variables_loaded", keys=sorted(collected.keys()))
        return collected

    def settings(self, prefix: str = DEFAULT_PREFIX) -> LoggerSettings:
        """Return :class:`LoggerSettings` built from :meth:`load`.

        Examples
        --------
        >>> loader = DefaultEnvLoader(environ={'TWIGLET_SERVICE_NAME': 'petshop', 'TWIGLET_LEVEL': 'warn'})
        >>> loader.settings()
        LoggerSettings(service_name='petshop', level='warn', properties={})
        """

        payload = self.load(prefix)
        service_name = payload.get("service_name")
        properties = payload.get("properties")
        return LoggerSettings(
            service_name=None if service_name is None else str(service_name),
            level=payload.get("level"),  # type: ignore[arg-type]
            properties=properties if isinstance(properties, dict) else {},
        )


def assign_nested(target: dict[str, object], key: str, value: object) -> None:
    """Assign ``value`` inside ``target`` using ``__`` as a nesting delimiter.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_nested(data, 'PROPERTIES__TRACE__ID', 'abc')
    >>> data
    {'properties': {'trace': {'id': 'abc'}}}
    """

    parts = key.split("__")
    cursor = target
    for part in parts[:-1]:
        cursor = _ensure_child_mapping(cursor, part)
    cursor[_resolve_key(cursor, parts[-1])] = value


def _resolve_key(mapping: dict[str, object], key: str) -> str:
    """Return an existing key that matches ``key`` (case-insensitive) or a new lowercase key."""

    lower = key.lower()
    for existing in mapping.keys():
        if existing.lower() == lower:
            return existing
    return lower


def _ensure_child_mapping(mapping: dict[str, object], key: str) -> dict[str, object]:
    """Ensure ``mapping[key]`` is a ``dict``, creating it when absent."""

    resolved = _resolve_key(mapping, key)
    if resolved not in mapping:
        mapping[resolved] = {}
    child = mapping[resolved]
    if not isinstance(child, dict):
        raise ValueError(f"Cannot override scalar with mapping for key {key}")
    return child


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('3.5'), _coerce('hello')
    (True, 10, 3.5, 'hello')
    """

    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
            return int(value)
        return float(value)
    except ValueError:
        return value
