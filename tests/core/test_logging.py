"""
Tests for the logging module.

Tests verify:
- Events are rendered with service metadata and bound context
- DEBUG logs are suppressed at INFO level
- Statement failures and cleanup failures are logged as structured events
"""

import json

import pytest

from sqlbridge.core.access import DatabaseAccess
from sqlbridge.core.errors import ExecutionError
from sqlbridge.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from tests._support.fakes import FakeDataSource, FakeDriverError, FakeResult


@pytest.fixture(autouse=True)
def json_logging():
    configure_logging(level="INFO", json_format=True, service="sqlbridge-tests", add_timestamp=False)
    clear_context()
    yield
    clear_context()


def _events(caplog):
    events = []
    for record in caplog.records:
        try:
            events.append(json.loads(record.getMessage()))
        except ValueError:
            continue
    return events


class TestConfigureLogging:
    def test_json_event_with_service_metadata(self, caplog):
        get_logger("tests.logging").warning("pool.exhausted", size=5)

        [event] = [e for e in _events(caplog) if e["event"] == "pool.exhausted"]
        assert event["size"] == 5
        assert event["level"] == "warning"
        assert event["service.name"] == "sqlbridge-tests"
        assert event["logger"] == "tests.logging"

    def test_debug_suppressed_at_info(self, caplog):
        get_logger("tests.logging.quiet").debug("noisy.detail")
        assert "noisy.detail" not in caplog.text

    def test_console_format(self, caplog):
        configure_logging(level="WARNING", json_format=False, add_timestamp=False)
        get_logger("tests.logging.console").warning("console.event", dialect="db2")
        assert "console.event" in caplog.text


class TestContext:
    def test_bound_context_included(self, caplog):
        bind_context(request_id="req-1")
        get_logger("tests.logging.ctx").warning("with.context")

        [event] = [e for e in _events(caplog) if e["event"] == "with.context"]
        assert event["request_id"] == "req-1"

    def test_unbind(self, caplog):
        bind_context(request_id="req-1", tenant="acme")
        unbind_context("request_id")
        get_logger("tests.logging.ctx").warning("after.unbind")

        [event] = [e for e in _events(caplog) if e["event"] == "after.unbind"]
        assert "request_id" not in event
        assert event["tenant"] == "acme"

    def test_log_context_is_scoped(self, caplog):
        logger = get_logger("tests.logging.scoped")
        with LogContext(batch="b-7"):
            logger.warning("inside")
        logger.warning("outside")

        events = {e["event"]: e for e in _events(caplog)}
        assert events["inside"]["batch"] == "b-7"
        assert "batch" not in events["outside"]


class TestAccessEvents:
    def test_statement_failure_logged(self, caplog):
        source = FakeDataSource(script=[FakeResult(error=FakeDriverError("no such table: t"))])
        with pytest.raises(ExecutionError):
            DatabaseAccess(source).execute("SELECT * FROM t")

        # module loggers may have been cached by an earlier configuration
        assert "statement.failed" in caplog.text
        assert "ExecutionError" in caplog.text
        assert "no such table" in caplog.text

    def test_cleanup_failures_logged(self, caplog):
        source = FakeDataSource(script=[FakeResult(rowcount=1)])
        source.connection.cursor_close_error = FakeDriverError("cursor gone")
        source.release_error = FakeDriverError("pool gone")

        DatabaseAccess(source).execute("UPDATE t SET n = 1")

        assert "cursor.close_failed" in caplog.text
        assert "connection.release_failed" in caplog.text
