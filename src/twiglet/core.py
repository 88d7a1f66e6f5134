"""Composition root for ``twiglet``.

Purpose
-------
Wire the environment adapter, the threshold filter, the stream sink and the
clock into a ready-to-use :class:`twiglet.logger.Logger`.

Contents
--------
* :func:`create_logger` – explicit construction with an optional threshold.
* :func:`logger_from_env` – construction from ``TWIGLET_*`` variables.

System Role
-----------
Applications that configure logging through their environment call
:func:`logger_from_env` once at start-up; everything else uses
:class:`Logger` directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, TextIO

from .adapters.clock.default import utc_now
from .adapters.env.default import DEFAULT_PREFIX, DefaultEnvLoader
from .adapters.filters.threshold import ThresholdFilter
from .domain.errors import MissingServiceNameError
from .domain.levels import Level
from .logger import Logger
from .observability import log_debug, make_event


def create_logger(
    service_name: str,
    *,
    default_properties: Mapping[Any, Any] | None = None,
    level: str | int | Level | None = None,
    now: Callable[[], datetime] = utc_now,
    output: TextIO | None = None,
) -> Logger:
    """Return a :class:`Logger`, attaching a :class:`ThresholdFilter` when *level* is set.

    Examples
    --------
    >>> logger = create_logger("petshop", level="warn")
    >>> logger.is_enabled_for("info"), logger.is_enabled_for("error")
    (False, True)
    """

    severity_filter = ThresholdFilter(level) if level is not None else None
    return Logger(
        service_name,
        default_properties=default_properties,
        now=now,
        output=output,
        severity_filter=severity_filter,
    )


def logger_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    prefix: str = DEFAULT_PREFIX,
    now: Callable[[], datetime] = utc_now,
    output: TextIO | None = None,
) -> Logger:
    """Return a :class:`Logger` configured from ``<PREFIX>_*`` variables.

    Why
    ----
    Deployments set the service name and default context per environment;
    reading them here keeps application code free of that wiring.

    What
    ----
    Reads ``SERVICE_NAME``, ``LEVEL`` and ``PROPERTIES__*`` below *prefix*
    through :class:`DefaultEnvLoader` and delegates to :func:`create_logger`.

    Raises
    ------
    MissingServiceNameError
        When no service name is configured.

    Examples
    --------
    >>> env = {"TWIGLET_SERVICE_NAME": "petshop", "TWIGLET_PROPERTIES__TRACE__ID": "abc"}
    >>> logger = logger_from_env(env)
    >>> logger.service_name, logger.context.get("trace.id")
    ('petshop', 'abc')
    """

    settings = DefaultEnvLoader(environ=environ).settings(prefix)
    if settings.service_name is None:
        raise MissingServiceNameError(f"{prefix}_SERVICE_NAME is not set")
    log_debug("logger_configured", **make_event(settings.service_name, None, {"source": "env"}))
    return create_logger(
        settings.service_name,
        default_properties=settings.properties,
        level=settings.level,
        now=now,
        output=output,
    )


__all__ = ["create_logger", "logger_from_env"]
