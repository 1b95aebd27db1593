"""
Dependency helpers for API routes.

These are kept as simple functions (not FastAPI Depends) because the app
keeps its stateful components on request.app.state.
"""

from __future__ import annotations

from fastapi import Request

from issue_tracker.api.state import AppState
from issue_tracker.backend import Backend, get_backend
from issue_tracker.repository import IssueRepo


def get_state(request: Request) -> AppState:
    state = getattr(request.app.state, "state", None)
    if state is None:
        state = AppState(backend=get_backend())
        request.app.state.state = state
    return state


def get_backend_for_request(request: Request) -> Backend:
    return get_state(request).backend


def get_issue_repo(request: Request) -> IssueRepo:
    state = get_state(request)
    if state.issue_repo is None:
        state.issue_repo = IssueRepo(state.backend)
    return state.issue_repo
