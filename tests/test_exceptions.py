"""
Tests for the exception hierarchy and HTTP status mapping.
"""

from __future__ import annotations

import pytest

from issue_tracker.exceptions import (
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    BackendError,
    ConfigurationError,
    IssueTrackerError,
    MissingRequiredFieldError,
    ValidationError,
    exception_to_http_status,
)


@pytest.mark.parametrize(
    "exc,status",
    [
        (ValidationError("bad"), 400),
        (MissingRequiredFieldError("title"), 400),
        (AuthenticationError(), 401),
        (BackendError("boom", status_code=503), 500),
        (APITimeoutError("backend", timeout_seconds=1), 500),
        (APIConnectionError("backend"), 500),
        (ConfigurationError("no url"), 500),
        (IssueTrackerError("generic"), 500),
    ],
)
def test_exception_to_http_status(exc, status):
    assert exception_to_http_status(exc) == status


def test_authentication_error_default_message():
    exc = AuthenticationError()
    assert exc.message == "Unauthorized: user ID missing"
    assert exc.error_code == "unauthorized"


def test_backend_error_keeps_service_message():
    exc = BackendError("Invalid login credentials", status_code=400, error_type="invalid_credentials")
    assert exc.message == "Invalid login credentials"
    assert exc.error_code == "backend_error"
    assert exc.status_code == 400
    assert exc.to_dict()["error"] == "Invalid login credentials"


def test_str_includes_detail():
    exc = APITimeoutError("backend", timeout_seconds=2.0)
    assert str(exc) == "Request to backend timed out: Timeout after 2.0s"


def test_request_id_is_generated():
    assert IssueTrackerError("x").request_id
    assert IssueTrackerError("x", request_id="rid").to_dict()["request_id"] == "rid"
