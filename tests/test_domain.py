"""
Tests for issue_tracker.domain.
"""

from __future__ import annotations

import pytest

from issue_tracker.domain import (
    FILL_ALL_FIELDS_MESSAGE,
    PASSWORD_TOO_SHORT_MESSAGE,
    Issue,
    IssueStatus,
    status_badge_colors,
    validate_credentials,
    validate_issue_fields,
)
from issue_tracker.exceptions import ValidationError


def test_status_values_are_display_strings():
    assert IssueStatus.choices() == ["Open", "In Progress", "Closed"]


def test_status_parse_accepts_member_and_string():
    assert IssueStatus.parse("In Progress") is IssueStatus.IN_PROGRESS
    assert IssueStatus.parse(IssueStatus.CLOSED) is IssueStatus.CLOSED


def test_status_parse_rejects_unknown():
    with pytest.raises(ValidationError) as exc_info:
        IssueStatus.parse("Done")
    assert exc_info.value.field == "status"


def test_badge_colors_differ_per_status():
    colors = {status_badge_colors(status) for status in IssueStatus}
    assert len(colors) == 3


def test_badge_colors_unknown_status_is_neutral():
    assert status_badge_colors("Whatever") == ("#f3f4f6", "#374151")


def test_issue_from_record_ignores_extra_columns():
    issue = Issue.from_record(
        {
            "id": 42,
            "title": "Crash",
            "description": "On start",
            "status": "Closed",
            "user_id": "u-1",
            "created_at": "2025-01-01T00:00:00+00:00",
            "priority": "high",
        }
    )
    assert issue.id == "42"
    assert issue.status is IssueStatus.CLOSED
    assert issue.to_dict() == {
        "id": "42",
        "title": "Crash",
        "description": "On start",
        "status": "Closed",
        "user_id": "u-1",
        "created_at": "2025-01-01T00:00:00+00:00",
    }


def test_issue_from_record_defaults_status_to_open():
    issue = Issue.from_record({"id": "1", "title": "t", "description": "d", "status": None})
    assert issue.status is IssueStatus.OPEN


def test_validate_issue_fields_strips():
    assert validate_issue_fields("  Title ", "\nBody\n") == ("Title", "Body")


@pytest.mark.parametrize("title,description", [("", "body"), ("title", ""), ("   ", "body"), (None, None)])
def test_validate_issue_fields_requires_both(title, description):
    with pytest.raises(ValidationError) as exc_info:
        validate_issue_fields(title, description)
    assert exc_info.value.message == FILL_ALL_FIELDS_MESSAGE


def test_validate_credentials_password_length():
    validate_credentials("a@example.com", "123456")
    with pytest.raises(ValidationError) as exc_info:
        validate_credentials("a@example.com", "12345")
    assert exc_info.value.message == PASSWORD_TOO_SHORT_MESSAGE
