"""
Tests for structured logging helpers.
"""

from __future__ import annotations

import json
import logging

import pytest

from issue_tracker.logging_config import LogContext, LogContextManager, PerformanceTracker, StructuredFormatter


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("issue_tracker.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_emits_json_with_extra_fields():
    payload = json.loads(StructuredFormatter().format(_record("issue_created", issue_id="abc")))

    assert payload["message"] == "issue_created"
    assert payload["level"] == "INFO"
    assert payload["service"] == "issue-tracker"
    assert payload["issue_id"] == "abc"


def test_context_manager_sets_and_clears_context():
    with LogContextManager(request_id="req-1", user_id="u-1", endpoint="dashboard"):
        payload = json.loads(StructuredFormatter().format(_record("page_rendered")))
        assert payload["request_id"] == "req-1"
        assert payload["user_id"] == "u-1"
        assert payload["endpoint"] == "dashboard"

    assert LogContext.get_all() == {"request_id": None, "user_id": None, "client_ip": None, "endpoint": None}


def test_performance_tracker_logs_failure_and_reraises(caplog):
    with caplog.at_level(logging.INFO, logger="performance"):
        with pytest.raises(ValueError):
            with PerformanceTracker("backend_request", path="/rest/v1/issues"):
                raise ValueError("boom")

    record = next(r for r in caplog.records if r.getMessage() == "backend_request_failed")
    assert record.error == "boom"
    assert record.duration_ms >= 0
