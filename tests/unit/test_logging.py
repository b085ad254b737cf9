"""Unit tests for the structured logging configuration.

Verifies that ``configure_logging()`` emits JSON, that ``request_id_var`` is
propagated, and that secret-bearing fields are redacted.
"""

from __future__ import annotations

import json
import logging
from io import StringIO
from typing import Any

import structlog

from blueribbon_live.core.logging_config import configure_logging, request_id_var


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _capture_records(event: str, **fields: Any) -> list[dict[str, Any]]:
    """Configure INFO logging, emit one structlog event and return parsed records."""
    configure_logging("INFO")

    buffer = StringIO()
    root = logging.getLogger()
    original_streams = []
    for handler in root.handlers:
        if hasattr(handler, "stream"):
            original_streams.append((handler, handler.stream))
            handler.stream = buffer

    structlog.get_logger("test.logging_config").info(event, **fields)

    for handler, stream in original_streams:
        handler.flush()
        handler.stream = stream

    lines = [line for line in buffer.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def _find(records: list[dict[str, Any]], event: str) -> dict[str, Any]:
    target = next((r for r in records if r.get("event") == event), None)
    assert target is not None, f"No record with event={event!r} in {records!r}"
    return target


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestConfigureLoggingJson:
    def test_json_contains_event_and_required_fields(self) -> None:
        record = _find(_capture_records("streams_fetched", count=3), "streams_fetched")

        assert record["count"] == 3
        assert record["level"] == "info"
        assert record["logger"] == "test.logging_config"
        assert "timestamp" in record

    def test_stdlib_records_are_rendered_as_json(self) -> None:
        configure_logging("INFO")
        buffer = StringIO()
        handler = logging.getLogger().handlers[0]
        original = handler.stream
        handler.stream = buffer
        try:
            logging.getLogger("uvicorn.error").warning("stdlib_message")
        finally:
            handler.flush()
            handler.stream = original

        record = json.loads(buffer.getvalue().strip().splitlines()[-1])
        assert record["event"] == "stdlib_message"
        assert record["level"] == "warning"

    def test_httpx_logger_silenced_above_debug(self) -> None:
        configure_logging("INFO")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_debug_level_lets_http_loggers_through(self) -> None:
        configure_logging("DEBUG")
        try:
            assert logging.getLogger().level == logging.DEBUG
            for name in ("httpx", "httpcore", "uvicorn.access"):
                assert logging.getLogger(name).level == logging.NOTSET
        finally:
            configure_logging("WARNING")

    def test_exception_traceback_is_rendered(self) -> None:
        configure_logging("INFO")
        buffer = StringIO()
        handler = logging.getLogger().handlers[0]
        original = handler.stream
        handler.stream = buffer
        try:
            try:
                raise RuntimeError("poll exploded")
            except RuntimeError:
                structlog.get_logger("test.logging_config").exception("stream_poll_crashed")
        finally:
            handler.flush()
            handler.stream = original

        record = _find(
            [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()],
            "stream_poll_crashed",
        )
        assert record["level"] == "error"
        assert "RuntimeError: poll exploded" in record["exception"]

    def test_bound_contextvars_are_merged(self) -> None:
        structlog.contextvars.bind_contextvars(path="/api/streams")
        try:
            records = _capture_records("request_finished")
        finally:
            structlog.contextvars.clear_contextvars()

        assert _find(records, "request_finished")["path"] == "/api/streams"


class TestRedaction:
    def test_secret_fields_are_redacted(self) -> None:
        record = _find(
            _capture_records(
                "token_debug",
                access_token="abc123",
                client_secret="shh",
                client_id="visible-id",
            ),
            "token_debug",
        )

        assert record["access_token"] == "[REDACTED]"
        assert record["client_secret"] == "[REDACTED]"
        assert record["client_id"] == "visible-id"

    def test_nested_headers_are_redacted(self) -> None:
        record = _find(
            _capture_records(
                "outbound_request",
                headers={"Authorization": "Bearer abc", "Client-Id": "visible-id"},
            ),
            "outbound_request",
        )

        assert record["headers"]["Authorization"] == "[REDACTED]"
        assert record["headers"]["Client-Id"] == "visible-id"


class TestRequestIdContextVar:
    def test_request_id_appears_in_output(self) -> None:
        token = request_id_var.set("test-req-1234")
        try:
            records = _capture_records("request_id_propagation_test")
        finally:
            request_id_var.reset(token)

        assert _find(records, "request_id_propagation_test")["request_id"] == "test-req-1234"

    def test_no_request_id_when_var_unset(self) -> None:
        token = request_id_var.set(None)
        try:
            records = _capture_records("no_request_id_test")
        finally:
            request_id_var.reset(token)

        assert _find(records, "no_request_id_test").get("request_id") is None


class TestConfigureLoggingIdempotent:
    def test_calling_twice_does_not_duplicate_handlers(self) -> None:
        configure_logging("INFO")
        configure_logging("INFO")

        assert len(logging.getLogger().handlers) == 1
