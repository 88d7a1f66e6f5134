"""Shared fixtures: a pinned clock, an in-memory stream, and a logger wired to both."""

from __future__ import annotations

import io
import json
from datetime import datetime
from typing import Any, Callable

import pytest

from twiglet import Logger

from tests.support import FIXED_INSTANT


@pytest.fixture()
def now() -> Callable[[], datetime]:
    """Clock pinned to the reference instant used across the suite."""

    return lambda: FIXED_INSTANT

@pytest.fixture()
def buffer() -> io.StringIO:
    return io.StringIO()

@pytest.fixture()
def logger(now, buffer) -> Logger:
    return Logger("petshop", now=now, output=buffer)

@pytest.fixture()
def read_events(buffer) -> Callable[[], list[dict[str, Any]]]:
    """Return a helper that parses every line written to ``buffer`` so far."""

    def _read() -> list[dict[str, Any]]:
        return [json.loads(line) for line in buffer.getvalue().splitlines()]

    return _read

@pytest.fixture()
def read_event(read_events) -> Callable[[], dict[str, Any]]:
    """Return a helper that parses the most recent line."""

    def _read() -> dict[str, Any]:
        events = read_events()
        assert events, "nothing was written"
        return events[-1]

    return _read
