"""Unit tests for the package diagnostics in ``observability``."""

from __future__ import annotations

import logging

import pytest

from twiglet import get_logger
from twiglet.observability import log_debug, log_error, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to stay silent by default."""

    logger = get_logger()
    assert logger.name == "twiglet"
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_structured_fields_attached(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="twiglet")
    log_debug("entry_rejected", service="petshop", level="info", reason="EmptyMessageError")
    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.getMessage() == "entry_rejected"
    assert getattr(record, "context") == {"service": "petshop", "level": "info", "reason": "EmptyMessageError"}


def test_log_error_level(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="twiglet")
    log_error("sink_write_failed", error="OSError()")
    assert caplog.records[-1].levelno == logging.ERROR


def test_make_event_merges_optional_payload() -> None:
    assert make_event("petshop", "warn", {"keys": 3}) == {"service": "petshop", "level": "warn", "keys": 3}
    assert make_event("petshop", None) == {"service": "petshop", "level": None}
