from __future__ import annotations

import pytest
import structlog

from cast_portal.common.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def _processors():
    return structlog.get_config()["processors"]


def test_json_output_formats_tracebacks_before_rendering():
    setup_logging(level="WARNING", json_output=True)
    processors = _processors()

    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert structlog.processors.format_exc_info in processors
    assert processors.index(structlog.processors.format_exc_info) < len(processors) - 1


def test_json_output_keeps_exception_text():
    setup_logging(level="WARNING", json_output=True)
    event = {"event": "request_failed", "exc_info": None}
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        event["exc_info"] = exc
        for processor in _processors()[-2:]:
            event = processor(None, "error", event)

    assert "RuntimeError: boom" in event
    assert "Traceback" in event


def test_console_output_leaves_exceptions_to_the_renderer():
    setup_logging(level="WARNING", json_output=False)
    processors = _processors()

    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert structlog.processors.format_exc_info not in processors
