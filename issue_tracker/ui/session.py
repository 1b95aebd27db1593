"""
Session state helpers for the Streamlit UI.
"""

from __future__ import annotations

import uuid

import streamlit as st

from issue_tracker.backend import Backend, create_backend
from issue_tracker.backend.models import AuthUser

PAGES = ("login", "signup", "logout", "dashboard")
DEFAULT_PAGE = "login"


def init_session_state() -> None:
    if "_session_id" not in st.session_state:
        st.session_state["_session_id"] = str(uuid.uuid4())
    if "_backend" not in st.session_state:
        # One client per browser session; it holds that user's access token.
        st.session_state["_backend"] = create_backend()


def get_session_id() -> str:
    return st.session_state.get("_session_id", "default")


def get_backend() -> Backend:
    if "_backend" not in st.session_state:
        init_session_state()
    return st.session_state["_backend"]


def current_user() -> AuthUser | None:
    session = getattr(get_backend(), "session", None)
    return session.user if session is not None else None


def current_page() -> str:
    page = st.query_params.get("page", DEFAULT_PAGE)
    return page if page in PAGES else DEFAULT_PAGE


def navigate(page: str) -> None:
    """Switch page. Safe inside widget callbacks (the rerun follows them)."""
    st.query_params["page"] = page
