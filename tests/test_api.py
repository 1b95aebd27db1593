"""
Tests for the issues API (issue_tracker.api).

These tests stay offline: the app runs on the in-memory backend.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from issue_tracker.api import AppState, create_app
from issue_tracker.config import settings
from issue_tracker.exceptions import BackendError
from issue_tracker.repository import IssueRepo


@pytest.fixture
def client(server_backend):
    app = create_app(backend=server_backend)
    return TestClient(app)


@pytest.fixture
def alice(signed_in_backend, sample_issues):
    user_id = signed_in_backend.session.user.id
    repo = IssueRepo(signed_in_backend)
    for item in sample_issues:
        repo.create(user_id, item["title"], item["description"], item["status"])
    return signed_in_backend


class FailingBackend:
    """Backend whose table reads fail like the hosted service would."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def get_user(self, access_token=None):
        return None

    def select(self, table, **kwargs):
        raise self.exc


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert resp.headers["Cache-Control"] == "no-store"


def test_missing_user_id_returns_401(client):
    resp = client.get("/api/issues")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized: user ID missing"}


def test_blank_user_id_returns_401(client):
    resp = client.get("/api/issues", headers={"x-user-id": "   "})
    assert resp.status_code == 401


def test_lists_users_issues_newest_first(client, alice, sample_issues):
    resp = client.get("/api/issues", headers={"x-user-id": alice.session.user.id})

    assert resp.status_code == 200
    issues = resp.json()["issues"]
    assert [issue["title"] for issue in issues] == [item["title"] for item in reversed(sample_issues)]
    assert set(issues[0]) == {"id", "title", "description", "status", "user_id", "created_at"}
    assert resp.headers["Cache-Control"] == "no-store"
    assert resp.headers["X-Request-ID"]


def test_only_named_users_issues_returned(client, alice, other_backend):
    IssueRepo(other_backend).create(other_backend.session.user.id, "bob's", "private")

    resp = client.get("/api/issues", headers={"x-user-id": other_backend.session.user.id})

    assert [issue["title"] for issue in resp.json()["issues"]] == ["bob's"]


def test_unknown_user_gets_empty_list(client):
    resp = client.get("/api/issues", headers={"x-user-id": "nobody"})
    assert resp.status_code == 200
    assert resp.json() == {"issues": []}


def test_request_id_is_echoed(client):
    resp = client.get("/api/issues", headers={"x-user-id": "nobody", "x-request-id": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_backend_error_returns_500_with_message():
    app = create_app(backend=FailingBackend(BackendError('relation "public.issues" does not exist', status_code=404)))
    client = TestClient(app)

    resp = client.get("/api/issues", headers={"x-user-id": "user-1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": 'relation "public.issues" does not exist'}


def test_unexpected_error_returns_generic_500():
    app = create_app(backend=FailingBackend(RuntimeError("driver exploded")))
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/api/issues", headers={"x-user-id": "user-1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Server error"}


class TestIdentityVerification:
    def test_matching_token_accepted(self, client, alice):
        resp = client.get(
            "/api/issues",
            headers={
                "x-user-id": alice.session.user.id,
                "authorization": f"Bearer {alice.session.access_token}",
            },
        )
        assert resp.status_code == 200
        assert len(resp.json()["issues"]) == 3

    def test_token_for_other_user_rejected(self, client, alice, other_backend):
        resp = client.get(
            "/api/issues",
            headers={
                "x-user-id": alice.session.user.id,
                "authorization": f"Bearer {other_backend.session.access_token}",
            },
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized: identity mismatch"}

    def test_unknown_token_rejected(self, client, alice):
        resp = client.get(
            "/api/issues",
            headers={"x-user-id": alice.session.user.id, "authorization": "Bearer not-a-token"},
        )
        assert resp.status_code == 401

    def test_token_required_when_configured(self, client, alice, monkeypatch):
        monkeypatch.setattr(settings, "require_access_token", True)

        resp = client.get("/api/issues", headers={"x-user-id": alice.session.user.id})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized: access token missing"}


def test_state_can_be_set_manually(server_backend):
    app = create_app()
    # Manually set up the app state that would normally be initialized by lifespan
    app.state.state = AppState(backend=server_backend)
    client = TestClient(app)

    resp = client.get("/api/issues", headers={"x-user-id": "nobody"})
    assert resp.status_code == 200


def test_security_headers(client):
    resp = client.get("/api/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_unreadable_stored_issue_returns_500(client, server_backend):
    server_backend.store.tables["issues"] = [
        {"id": "1", "title": "t", "description": "d", "status": "Reopened", "user_id": "u1", "created_at": "2025-01-01"}
    ]

    resp = client.get("/api/issues", headers={"x-user-id": "u1"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Unknown status: 'Reopened'"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}
    assert resp.headers["X-Request-ID"]


def test_wrong_method_uses_error_envelope(client):
    resp = client.post("/api/issues", headers={"x-user-id": "u1"})

    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}
    assert "GET" in resp.headers["Allow"]
