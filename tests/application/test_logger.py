"""Logger facade behaviour: severity methods, derivation, enrichment, and filtering."""

from __future__ import annotations

import io
import logging

import pytest

from twiglet import Logger, ThresholdFilter
from twiglet.domain.errors import (
    EmptyMessageError,
    InvalidLevelError,
    InvalidMessageTypeError,
    MissingMessageFieldError,
    MissingServiceNameError,
)

from tests.support import FIXED_TIMESTAMP

LEVELS = [
    ("debug", "debug"),
    ("info", "info"),
    ("warning", "warn"),
    ("warn", "warn"),
    ("critical", "fatal"),
    ("fatal", "fatal"),
    ("error", "error"),
]


class RecordingSink:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)


class BrokenSink:
    def write_line(self, line: str) -> None:
        raise OSError("disk full")


@pytest.mark.parametrize("service_name", ["", "  ", None, 42])
def test_missing_service_name(service_name) -> None:
    with pytest.raises(MissingServiceNameError):
        Logger(service_name)


def test_logs_mandatory_attributes(logger, read_event) -> None:
    logger.error({"message": "Out of pets exception"})
    assert read_event() == {
        "message": "Out of pets exception",
        "@timestamp": FIXED_TIMESTAMP,
        "service": {"name": "petshop"},
        "log": {"level": "error"},
    }


def test_logs_the_provided_message(logger, read_event) -> None:
    logger.error({"event": {"action": "exception"}, "message": "Emergency! Emergency!"})
    event = read_event()
    assert event["event"]["action"] == "exception"
    assert event["message"] == "Emergency! Emergency!"


def test_logs_scoped_properties_defined_at_creation(now, buffer, read_event) -> None:
    extra_properties = {
        "trace": {"id": "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb"},
        "service": {"type": "shop"},
        "request": {"method": "get"},
        "response": {"status_code": 200},
    }
    logger = Logger("petshop", now=now, output=buffer, default_properties=extra_properties)

    logger.error({"message": "GET /cats"})
    event = read_event()

    assert event["trace"]["id"] == "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb"
    assert event["service"] == {"name": "petshop", "type": "shop"}
    assert event["request"]["method"] == "get"
    assert event["response"]["status_code"] == 200


def test_with_properties_adds_context(logger, read_event) -> None:
    purchase_logger = logger.with_properties(
        {
            "trace": {"id": "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb"},
            "customer": {"full_name": "Freda Bloggs"},
            "event": {"action": "pet purchase"},
        }
    )
    purchase_logger.info(
        {
            "message": "customer bought a dog",
            "pet": {"name": "Barker", "species": "dog", "breed": "Bitsa"},
        }
    )
    event = read_event()

    assert event["trace"]["id"] == "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb"
    assert event["customer"]["full_name"] == "Freda Bloggs"
    assert event["event"]["action"] == "pet purchase"
    assert event["message"] == "customer bought a dog"
    assert event["pet"]["name"] == "Barker"


def test_derived_context_is_not_back_propagated(logger, read_events) -> None:
    child = logger.with_properties({"trace": {"id": "abc"}})
    child.info({"message": "x"})
    logger.info({"message": "y"})

    derived_event, base_event = read_events()
    assert derived_event["trace"]["id"] == "abc"
    assert derived_event["message"] == "x"
    assert "trace" not in base_event
    assert logger.context == {}


def test_with_properties_replaces_parent_context(now, buffer, read_events) -> None:
    base = Logger("petshop", now=now, output=buffer, default_properties={"event": {"action": "startup"}})
    child = base.with_properties({"trace": {"id": "abc"}})
    grandchild = child.with_properties({"customer": {"id": 7}})

    child.info("from child")
    grandchild.info("from grandchild")
    base.info("from base")

    child_event, grandchild_event, base_event = read_events()
    assert "event" not in child_event
    assert child_event["trace"] == {"id": "abc"}
    assert grandchild_event["customer"] == {"id": 7}
    assert "trace" not in grandchild_event
    assert base_event["event"] == {"action": "startup"}
    assert grandchild.service_name == base.service_name
    assert grandchild.sink is base.sink


def test_logs_message_string_property(logger, read_event) -> None:
    message = {}
    message["message"] = "Guinea pigs arrived"
    logger.debug(message)
    assert read_event()["message"] == "Guinea pigs arrived"


def test_logs_multiple_messages_in_order(logger, buffer) -> None:
    logger.debug({"message": "hi"})
    logger.info({"message": "there"})

    expected_output = (
        '{"@timestamp":"2020-05-11T15:01:01.000Z",'
        '"service":{"name":"petshop"},"log":{"level":"debug"},"message":"hi"}'
        "\n"
        '{"@timestamp":"2020-05-11T15:01:01.000Z",'
        '"service":{"name":"petshop"},"log":{"level":"info"},"message":"there"}'
        "\n"
    )
    assert buffer.getvalue() == expected_output


def test_converts_dotted_keys_to_nested_objects(logger, read_event) -> None:
    logger.debug(
        {
            "trace.id": "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb",
            "message": "customer bought a dog",
            "pet.name": "Barker",
            "pet.species": "dog",
            "pet.breed": "Bitsa",
        }
    )
    event = read_event()
    assert event["trace"]["id"] == "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb"
    assert event["message"] == "customer bought a dog"
    assert event["pet"] == {"name": "Barker", "species": "dog", "breed": "Bitsa"}


def test_mixes_dotted_keys_and_nested_objects(logger, read_event) -> None:
    logger.debug(
        {
            "trace.id": "1c8a5fb2-fecd-44d8-92a4-449eb2ce4dcb",
            "message": "customer bought a dog",
            "pet": {"name": "Barker", "breed": "Bitsa"},
            "pet.species": "dog",
        }
    )
    event = read_event()
    assert event["pet"] == {"name": "Barker", "breed": "Bitsa", "species": "dog"}


def test_lists_of_mappings_in_scoped_properties(now, buffer, read_event) -> None:
    logger = Logger("petshop", now=now, output=buffer, default_properties={"tags": [{"k": "v"}, "plain"]})
    logger.info("hi")
    assert read_event()["tags"] == [{"k": "v"}, "plain"]


def test_lists_of_mappings_in_messages(logger, read_event) -> None:
    logger.info({"message": "hi", "pets": [{"name": "Barker"}, {"name": "Tiddles"}]})
    assert read_event()["pets"] == [{"name": "Barker"}, {"name": "Tiddles"}]


def test_dotted_scoped_properties_are_normalised(now, buffer, read_event) -> None:
    logger = Logger("petshop", now=now, output=buffer, default_properties={"service.type": "shop"})
    logger.info("hello")
    assert read_event()["service"] == {"name": "petshop", "type": "shop"}


def test_logs_error_with_stack_trace(logger, read_event) -> None:
    try:
        1 / 0
    except ZeroDivisionError as exc:
        logger.error({"message": "Artificially raised exception"}, exc)

    event = read_event()
    assert event["message"] == "Artificially raised exception"
    assert event["error"]["message"] == "division by zero"
    assert "test_logger.py" in event["error"]["stack_trace"].splitlines()[0]


def test_logs_error_without_stack_trace(logger, read_event) -> None:
    logger.error({"message": "Artificially raised exception"}, RuntimeError("Connection timed-out"))

    event = read_event()
    assert event["message"] == "Artificially raised exception"
    assert event["error"]["message"] == "Connection timed-out"
    assert "stack_trace" not in event["error"]


def test_critical_accepts_error_object(logger, read_event) -> None:
    logger.critical("shutting down", RuntimeError("out of memory"))
    event = read_event()
    assert event["log"]["level"] == "fatal"
    assert event["error"] == {"message": "out of memory"}


def test_dotted_message_key_writes_nothing(logger, buffer) -> None:
    with pytest.raises(InvalidMessageTypeError):
        logger.info({"message": "bought a dog", "message.detail": "extra"})
    assert buffer.getvalue() == ""


def test_error_accepts_objects_with_message(logger, read_event) -> None:
    class Failure:
        message = "divided by 0"

    logger.error("calculation failed", Failure())
    assert read_event()["error"] == {"message": "divided by 0"}


def test_caller_error_fields_win(logger, read_event) -> None:
    logger.error({"message": "m", "error": {"message": "explicit"}}, RuntimeError("automatic"))
    assert read_event()["error"] == {"message": "explicit"}


@pytest.mark.parametrize(("method", "level"), LEVELS)
def test_structured_level_tags(logger, read_event, method, level) -> None:
    getattr(logger, method)({"message": "a log message"})
    event = read_event()
    assert event["log"]["level"] == level
    assert event["message"] == "a log message"


@pytest.mark.parametrize(("method", "level"), LEVELS)
def test_text_level_tags(logger, read_event, method, level) -> None:
    getattr(logger, method)("a log message")
    event = read_event()
    assert event["log"]["level"] == level
    assert event["message"] == "a log message"


@pytest.mark.parametrize(("method", "level"), LEVELS)
def test_lazy_messages(logger, read_event, method, level) -> None:
    getattr(logger, method)(lambda: "a lazy log message")
    event = read_event()
    assert event["log"]["level"] == level
    assert event["message"] == "a lazy log message"


def test_generic_log_method(logger, read_event) -> None:
    logger.log("warning", {"message": "generic"})
    assert read_event()["log"]["level"] == "warn"
    with pytest.raises(InvalidLevelError):
        logger.log("verbose", "nope")


@pytest.mark.parametrize("message", ["", "   ", {"message": ""}, {"message": " \n"}])
def test_empty_messages_write_nothing(logger, buffer, message) -> None:
    with pytest.raises(EmptyMessageError):
        logger.info(message)
    assert buffer.getvalue() == ""


def test_missing_message_field_writes_nothing(logger, buffer) -> None:
    with pytest.raises(MissingMessageFieldError):
        logger.info({"event": {"action": "noop"}})
    assert buffer.getvalue() == ""


def test_invalid_message_type_writes_nothing(logger, buffer) -> None:
    with pytest.raises(InvalidMessageTypeError):
        logger.info(["not", "a", "message"])
    assert buffer.getvalue() == ""


def test_custom_sink_receives_lines_without_newline(now) -> None:
    sink = RecordingSink()
    logger = Logger("petshop", now=now, sink=sink)
    logger.info("one")
    logger.info("two")
    assert len(sink.lines) == 2
    assert all("\n" not in line for line in sink.lines)


def test_sink_failures_propagate_and_are_diagnosed(now, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="twiglet")
    logger = Logger("petshop", now=now, sink=BrokenSink())
    with pytest.raises(OSError, match="disk full"):
        logger.info("hello")
    assert caplog.records[-1].getMessage() == "sink_write_failed"


def test_threshold_filter_suppresses_lower_levels(now, buffer, read_events) -> None:
    severity_filter = ThresholdFilter("warn")
    logger = Logger("petshop", now=now, output=buffer, severity_filter=severity_filter)
    calls: list[str] = []

    def _expensive() -> str:
        calls.append("called")
        return "expensive"

    logger.debug(_expensive)
    logger.info("skipped")
    logger.warn("kept")
    logger.error("kept too")

    assert [event["message"] for event in read_events()] == ["kept", "kept too"]
    assert calls == []
    assert not logger.is_enabled_for("info")
    assert logger.is_enabled_for("fatal")


def test_threshold_filter_is_shared_with_derived_loggers(now, buffer, read_events) -> None:
    severity_filter = ThresholdFilter("error")
    logger = Logger("petshop", now=now, output=buffer, severity_filter=severity_filter)
    child = logger.with_properties({"trace.id": "abc"})

    child.info("dropped")
    severity_filter.level = "info"
    child.info("kept")

    assert [event["message"] for event in read_events()] == ["kept"]


def test_filtered_calls_skip_validation(now) -> None:
    logger = Logger("petshop", now=now, output=io.StringIO(), severity_filter=ThresholdFilter("fatal"))
    logger.info("")


def test_without_filter_everything_is_enabled(logger) -> None:
    assert all(logger.is_enabled_for(level) for level in ("debug", "info", "warn", "error", "fatal"))
