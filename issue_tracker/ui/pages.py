"""
Page renderers for Streamlit UI.
"""

from __future__ import annotations

import logging

import streamlit as st

from issue_tracker.config import settings
from issue_tracker.domain import NOT_LOGGED_IN_MESSAGE
from issue_tracker.ui import actions
from issue_tracker.ui.components import render_error, render_issue_list, render_new_issue_form
from issue_tracker.ui.session import current_user, get_backend, navigate

logger = logging.getLogger(__name__)


def _on_auth_submit(*, sign_up: bool, on_success_page: str, email_redirect_to: str | None = None) -> None:
    state = st.session_state
    ok = actions.authenticate(
        state,
        get_backend(),
        state.get("auth_email", ""),
        state.get("auth_password", ""),
        sign_up=sign_up,
        email_redirect_to=email_redirect_to,
    )
    if not ok:
        return
    state["auth_password"] = ""
    if sign_up and current_user() is None:
        # Confirmation email pending, nothing to show on the dashboard yet.
        navigate("login")
        return
    navigate(on_success_page)


def _render_credentials_form(submit_label: str, on_submit, kwargs: dict) -> None:
    with st.form("auth_form", clear_on_submit=False, border=True):
        st.text_input("Email", key="auth_email", placeholder="Email")
        st.text_input("Password", key="auth_password", type="password", placeholder="Password")
        st.form_submit_button(submit_label, type="primary", use_container_width=True, on_click=on_submit, kwargs=kwargs)


def render_login_page() -> None:
    state = st.session_state
    sign_up_mode = state.get(actions.SIGN_UP_MODE_KEY, False)
    st.title("Sign Up" if sign_up_mode else "Login")

    render_error(state.get(actions.AUTH_ERROR_KEY, ""))
    if state.get(actions.AUTH_NOTICE_KEY):
        st.success(state[actions.AUTH_NOTICE_KEY])

    _render_credentials_form(
        "Sign Up" if sign_up_mode else "Login",
        _on_auth_submit,
        {"sign_up": sign_up_mode, "on_success_page": "dashboard"},
    )
    st.button(
        "Already have an account? Login" if sign_up_mode else "Need an account? Sign Up",
        type="tertiary",
        on_click=actions.toggle_sign_up_mode,
        args=(state,),
    )


def render_signup_page() -> None:
    state = st.session_state
    st.title("Sign Up")
    render_error(state.get(actions.AUTH_ERROR_KEY, ""))
    _render_credentials_form(
        "Sign Up",
        _on_auth_submit,
        {
            "sign_up": True,
            "on_success_page": "login",
            "email_redirect_to": settings.email_redirect_url,
        },
    )
    st.markdown("[Already have an account? Login](?page=login)")


def _on_logout() -> None:
    actions.sign_out(st.session_state, get_backend())
    navigate("login")


def render_logout_page() -> None:
    st.write("Logging out...")
    actions.sign_out(st.session_state, get_backend())
    navigate("login")
    st.rerun()


def render_dashboard_page() -> None:
    state = st.session_state
    backend = get_backend()
    actions.init_dashboard_state(state)

    header_col, logout_col = st.columns([5, 1])
    with header_col:
        st.title("Issue Dashboard")
    with logout_col:
        st.button("Logout", use_container_width=True, on_click=_on_logout)

    if not state[actions.LOADED_KEY]:
        with st.spinner("Loading..."):
            actions.fetch_issues(state, backend)

    # The user the backend resolved on the last fetch, not the local session.
    user = state[actions.CURRENT_USER_KEY]
    error = state.get(actions.ERROR_KEY, "")
    if user is None:
        render_error(error or NOT_LOGGED_IN_MESSAGE)
        st.markdown("[Go to login](?page=login)")
        return

    render_error(error)

    st.markdown("## Your Issues")
    render_issue_list(state[actions.ISSUES_KEY], backend)
    render_new_issue_form(backend)

    st.caption(f"JSON: `GET {settings.api_url}/api/issues` with header `x-user-id: {user.id}`")
