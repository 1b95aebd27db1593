"""
Event handlers for the Streamlit UI.

Handlers take the session-state mapping and a backend client, perform one
backend round trip and record the outcome in state. They never import
Streamlit, so pages stay thin and the flows can be driven from tests with a
plain dict.

Errors from the backend are shown verbatim: handlers catch
``IssueTrackerError`` and store ``exc.message`` under ``ERROR_KEY``.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from issue_tracker.backend import Backend
from issue_tracker.backend.models import AuthUser
from issue_tracker.domain import (
    NOT_LOGGED_IN_MESSAGE,
    SIGNUP_CONFIRMATION_MESSAGE,
    Issue,
    IssueStatus,
    validate_credentials,
    validate_issue_fields,
)
from issue_tracker.exceptions import IssueTrackerError
from issue_tracker.repository import IssueRepo

logger = logging.getLogger(__name__)

State = MutableMapping[str, Any]

# Dashboard
ISSUES_KEY = "_issues"
LOADED_KEY = "_issues_loaded"
ERROR_KEY = "_dashboard_error"
EDITING_ID_KEY = "_editing_issue_id"
EDIT_TITLE_KEY = "_edit_title"
EDIT_DESCRIPTION_KEY = "_edit_description"
EDIT_STATUS_KEY = "_edit_status"
PENDING_DELETE_KEY = "_pending_delete_id"
NEW_TITLE_KEY = "new_issue_title"
NEW_DESCRIPTION_KEY = "new_issue_description"
NEW_STATUS_KEY = "new_issue_status"

# Auth
AUTH_ERROR_KEY = "_auth_error"
AUTH_NOTICE_KEY = "_auth_notice"
SIGN_UP_MODE_KEY = "_sign_up_mode"
CURRENT_USER_KEY = "_current_user"

# Per-user state, dropped on sign out
USER_SCOPED_KEYS = (
    ISSUES_KEY,
    LOADED_KEY,
    ERROR_KEY,
    EDITING_ID_KEY,
    EDIT_TITLE_KEY,
    EDIT_DESCRIPTION_KEY,
    EDIT_STATUS_KEY,
    PENDING_DELETE_KEY,
    NEW_TITLE_KEY,
    NEW_DESCRIPTION_KEY,
    NEW_STATUS_KEY,
    AUTH_ERROR_KEY,
    AUTH_NOTICE_KEY,
    CURRENT_USER_KEY,
)


def init_dashboard_state(state: State) -> None:
    state.setdefault(ISSUES_KEY, [])
    state.setdefault(LOADED_KEY, False)
    state.setdefault(CURRENT_USER_KEY, None)
    state.setdefault(ERROR_KEY, "")
    state.setdefault(EDITING_ID_KEY, None)
    state.setdefault(PENDING_DELETE_KEY, None)
    state.setdefault(NEW_TITLE_KEY, "")
    state.setdefault(NEW_DESCRIPTION_KEY, "")
    state.setdefault(NEW_STATUS_KEY, IssueStatus.OPEN.value)


def reset_new_issue_form(state: State) -> None:
    state[NEW_TITLE_KEY] = ""
    state[NEW_DESCRIPTION_KEY] = ""
    state[NEW_STATUS_KEY] = IssueStatus.OPEN.value


def _fail(state: State, key: str, exc: IssueTrackerError) -> None:
    logger.info("UI action failed: %s", exc)
    state[key] = exc.message


def _resolve_user(state: State, backend: Backend) -> AuthUser | None:
    """Ask the backend who is signed in and record the answer in state.

    A local session the backend no longer accepts (expired or revoked token)
    is dropped.
    """
    user = backend.get_user()
    if user is None and backend.session is not None:
        logger.info("Dropping stale session for user %s", backend.session.user.id)
        backend.session = None
    state[CURRENT_USER_KEY] = user
    return user


# =============================================================================
# Auth
# =============================================================================


def toggle_sign_up_mode(state: State) -> None:
    state[SIGN_UP_MODE_KEY] = not state.get(SIGN_UP_MODE_KEY, False)
    state[AUTH_ERROR_KEY] = ""


def authenticate(
    state: State,
    backend: Backend,
    email: str,
    password: str,
    *,
    sign_up: bool = False,
    email_redirect_to: str | None = None,
) -> bool:
    """
    Sign a user up or in.

    Returns True on success; on failure the message is in ``AUTH_ERROR_KEY``.
    """
    state[AUTH_ERROR_KEY] = ""
    state[AUTH_NOTICE_KEY] = ""
    try:
        validate_credentials(email, password)
        if sign_up:
            backend.sign_up(email, password, email_redirect_to=email_redirect_to)
            state[AUTH_NOTICE_KEY] = SIGNUP_CONFIRMATION_MESSAGE
        else:
            backend.sign_in_with_password(email, password)
    except IssueTrackerError as exc:
        _fail(state, AUTH_ERROR_KEY, exc)
        return False
    # A new identity must not see the previous user's cached list.
    state[LOADED_KEY] = False
    return True


def sign_out(state: State, backend: Backend) -> None:
    """Sign out and drop all per-user state. Backend failures are logged only."""
    try:
        backend.sign_out()
    except IssueTrackerError as exc:
        logger.warning("Sign out failed: %s", exc)
    for key in USER_SCOPED_KEYS:
        state.pop(key, None)


# =============================================================================
# Dashboard
# =============================================================================


def fetch_issues(state: State, backend: Backend) -> list[Issue]:
    """Reload the signed-in user's issues, newest first."""
    state[LOADED_KEY] = True
    try:
        user = _resolve_user(state, backend)
        if user is None:
            state[ISSUES_KEY] = []
            state[ERROR_KEY] = NOT_LOGGED_IN_MESSAGE
            return []
        issues = IssueRepo(backend).list_for_user(user.id)
    except IssueTrackerError as exc:
        _fail(state, ERROR_KEY, exc)
        return state.get(ISSUES_KEY, [])
    state[ISSUES_KEY] = issues
    return issues


def add_issue(state: State, backend: Backend, title: str, description: str, status: str) -> bool:
    state[ERROR_KEY] = ""
    try:
        # An incomplete form makes no request at all.
        validate_issue_fields(title, description)
        user = _resolve_user(state, backend)
        if user is None:
            state[ERROR_KEY] = NOT_LOGGED_IN_MESSAGE
            return False
        IssueRepo(backend).create(user.id, title, description, status)
    except IssueTrackerError as exc:
        _fail(state, ERROR_KEY, exc)
        return False
    reset_new_issue_form(state)
    fetch_issues(state, backend)
    return True


def start_edit(state: State, issue: Issue) -> None:
    state[EDITING_ID_KEY] = issue.id
    state[EDIT_TITLE_KEY] = issue.title
    state[EDIT_DESCRIPTION_KEY] = issue.description
    state[EDIT_STATUS_KEY] = issue.status.value


def cancel_edit(state: State) -> None:
    state[EDITING_ID_KEY] = None
    state[ERROR_KEY] = ""


def save_edit(state: State, backend: Backend, title: str, description: str, status: str) -> bool:
    state[ERROR_KEY] = ""
    issue_id = state.get(EDITING_ID_KEY)
    if issue_id is None:
        return False
    try:
        IssueRepo(backend).update(issue_id, title, description, status)
    except IssueTrackerError as exc:
        _fail(state, ERROR_KEY, exc)
        return False
    state[EDITING_ID_KEY] = None
    fetch_issues(state, backend)
    return True


def request_delete(state: State, issue_id: str) -> None:
    """First step of a delete: remember the issue and ask for confirmation."""
    state[PENDING_DELETE_KEY] = issue_id


def cancel_delete(state: State) -> None:
    state[PENDING_DELETE_KEY] = None


def confirm_delete(state: State, backend: Backend) -> bool:
    issue_id = state.get(PENDING_DELETE_KEY)
    state[PENDING_DELETE_KEY] = None
    if issue_id is None:
        return False
    try:
        IssueRepo(backend).delete(issue_id)
    except IssueTrackerError as exc:
        _fail(state, ERROR_KEY, exc)
        return False
    if state.get(EDITING_ID_KEY) == issue_id:
        state[EDITING_ID_KEY] = None
    fetch_issues(state, backend)
    return True
