"""
Tests for IssueRepo over the in-memory backend.
"""

from __future__ import annotations

import pytest

from issue_tracker.domain import FILL_ALL_FIELDS_MESSAGE, IssueStatus
from issue_tracker.exceptions import BackendError, ValidationError
from issue_tracker.repository import IssueRepo


@pytest.fixture
def repo(signed_in_backend):
    return IssueRepo(signed_in_backend)


@pytest.fixture
def user_id(signed_in_backend):
    return signed_in_backend.session.user.id


def test_create_then_list_newest_first(repo, user_id, sample_issues):
    for item in sample_issues:
        repo.create(user_id, item["title"], item["description"], item["status"])

    issues = repo.list_for_user(user_id)

    assert [issue.title for issue in issues] == [item["title"] for item in reversed(sample_issues)]
    assert issues[0].status is IssueStatus.CLOSED
    assert all(issue.user_id == user_id for issue in issues)


def test_create_defaults_to_open_and_strips(repo, user_id):
    issue = repo.create(user_id, "  Crash  ", " on start ")
    assert issue.title == "Crash"
    assert issue.description == "on start"
    assert issue.status is IssueStatus.OPEN


def test_create_rejects_blank_fields(repo, user_id, signed_in_backend):
    with pytest.raises(ValidationError) as exc_info:
        repo.create(user_id, "", "body")
    assert exc_info.value.message == FILL_ALL_FIELDS_MESSAGE
    assert signed_in_backend.select("issues") == []


def test_create_rejects_unknown_status(repo, user_id):
    with pytest.raises(ValidationError):
        repo.create(user_id, "t", "d", "Done")


def test_list_for_empty_user_is_empty(repo):
    assert repo.list_for_user("") == []


def test_update_changes_fields(repo, user_id):
    issue = repo.create(user_id, "Crash", "on start")

    updated = repo.update(issue.id, "Crash on start", "Only on Android", IssueStatus.IN_PROGRESS)

    assert updated.status is IssueStatus.IN_PROGRESS
    assert repo.list_for_user(user_id)[0].description == "Only on Android"


def test_update_unknown_id_returns_none(repo):
    assert repo.update("missing", "t", "d", "Open") is None


def test_delete_removes_issue(repo, user_id):
    keep = repo.create(user_id, "keep", "k")
    drop = repo.create(user_id, "drop", "d")

    repo.delete(drop.id)

    assert [issue.id for issue in repo.list_for_user(user_id)] == [keep.id]


def test_other_users_issues_are_invisible(repo, user_id, other_backend):
    IssueRepo(other_backend).create(other_backend.session.user.id, "bob's", "private")

    assert repo.list_for_user(other_backend.session.user.id) == []


def test_creating_for_another_user_fails(repo, other_backend):
    with pytest.raises(BackendError):
        repo.create(other_backend.session.user.id, "t", "d")


def test_custom_table(signed_in_backend, user_id):
    repo = IssueRepo(signed_in_backend, table="tickets")
    repo.create(user_id, "t", "d")

    assert len(signed_in_backend.select("tickets")) == 1
    assert signed_in_backend.select("issues") == []


def test_unreadable_row_is_backend_error(server_backend):
    server_backend.store.tables["issues"] = [
        {"id": "1", "title": "t", "description": "d", "status": "Reopened", "user_id": "u1", "created_at": "2025-01-01"}
    ]

    with pytest.raises(BackendError) as exc_info:
        IssueRepo(server_backend).list_for_user("u1")

    assert exc_info.value.message == "Unknown status: 'Reopened'"
    assert exc_info.value.error_type == "invalid_record"
