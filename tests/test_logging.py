"""Tests for the structured logging system (studio_kernel/logging_config.py)."""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from studio_kernel.domain.records import InvoiceStatus
from studio_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "studio_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("rolled_up", extra={"item_count": 42, "state": "ok"})

        record = _parse_log(stream)
        assert record["item_count"] == 42
        assert record["state"] == "ok"

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "invoice_state",
            extra={
                "total": Decimal("1320.00"),
                "status": InvoiceStatus.SENT,
                "due": date(2024, 2, 1),
                "at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            },
        )

        record = _parse_log(stream)
        assert record["total"] == "1320.00"
        assert record["status"] == "Sent"
        assert record["due"] == "2024-02-01"
        assert record["at"].startswith("2024-01-01T12:00:00")

    def test_sets_and_unknown_objects_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)

        class Opaque:
            def __str__(self):
                return "opaque-value"

        get_logger("test").info(
            "grants",
            extra={"roles": frozenset({"principal", "admin"}), "other": Opaque()},
        )

        record = _parse_log(stream)
        assert record["roles"] == ["admin", "principal"]
        assert record["other"] == "opaque-value"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", record_id="exp-1")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["record_id"] == "exp-1"

    def test_studio_exception_fields_extracted(self):
        """Studio kernel exceptions carry a .code and structured attributes."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from studio_kernel.exceptions import InvalidRateError

        try:
            raise InvalidRateError("tax_rate", "117")
        except InvalidRateError:
            logger.error("rate_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_RATE"
        assert record["exc_type"] == "InvalidRateError"
        assert record["exc_field"] == "tax_rate"
        assert record["exc_value"] == "117"
        assert "traceback" in record

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "actor_id" not in record

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", actor_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "actor_id": "y"}

    def test_unknown_field_rejected(self):
        with pytest.raises(KeyError):
            LogContext.set(event_id="nope")

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner"):
            assert LogContext.get_all()["correlation_id"] == "inner"
        assert LogContext.get_all()["correlation_id"] == "outer"

    def test_bind_restores_none(self):
        assert "record_id" not in LogContext.get_all()
        with LogContext.bind(record_id="temp"):
            assert LogContext.get_all()["record_id"] == "temp"
        assert "record_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            tenant_id="s",
            actor_id="a",
            record_id="r",
            trace_id="t",
        )
        ctx = LogContext.get_all()
        assert len(ctx) == 5
        assert ctx["tenant_id"] == "s"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        assert len(logging.getLogger("studio_kernel").handlers) == 1

    def test_get_logger_returns_child(self):
        assert get_logger("engines.budget").name == "studio_kernel.engines.budget"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "studio_kernel.deep.nested.module"
