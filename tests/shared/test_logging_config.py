"""Tests for stdout logging configuration and context propagation."""

from __future__ import annotations

import json
import logging

import pytest

from packages.fleetwatch_shared.logging import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    log_context,
)


@pytest.fixture(autouse=True)
def _reset_context():
    clear_context()
    yield
    clear_context()


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("fleetwatch.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    ContextFilter().filter(record)
    return record


def test_log_context_is_scoped_to_block() -> None:
    """Bound values should disappear when the block exits."""
    bind_context(service="fleetwatch", ignored=None)
    with log_context({"hostname": "web-1"}):
        assert get_context() == {"service": "fleetwatch", "hostname": "web-1"}

    assert get_context() == {"service": "fleetwatch"}


def test_json_formatter_includes_context_and_extras() -> None:
    """JSON lines should carry core fields, bound context and ``extra`` fields."""
    with log_context({"hostname": "web-1"}):
        record = _record("delta stored", line_count=3)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "fleetwatch.test"
    assert payload["message"] == "delta stored"
    assert payload["hostname"] == "web-1"
    assert payload["line_count"] == 3


def test_plain_formatter_appends_sorted_context() -> None:
    """Plain output should end with sorted key=value pairs."""
    with log_context({"status": "ok", "hostname": "web-1"}):
        record = _record("delta stored")

    assert PlainFormatter().format(record).endswith(
        "delta stored hostname=web-1 status=ok"
    )


def test_configure_logging_replaces_root_handlers() -> None:
    """Repeated configuration should leave exactly one stdout handler."""
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        configure_logging(level="debug", json_output=False, service="fleetwatch")
        configure_logging(level="WARNING", json_output=True, environment="test")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.WARNING
        assert get_context()["environment"] == "test"
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
