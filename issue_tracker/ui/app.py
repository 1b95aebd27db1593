"""
Streamlit app wiring: page config, styles, session and routing.
"""

from __future__ import annotations

import streamlit as st

from issue_tracker.config import settings
from issue_tracker.logging_config import LogContextManager, log_event
from issue_tracker.ui.pages import (
    render_dashboard_page,
    render_login_page,
    render_logout_page,
    render_signup_page,
)
from issue_tracker.ui.session import current_page, current_user, get_session_id, init_session_state
from issue_tracker.ui.styles import apply_styles

PAGE_RENDERERS = {
    "login": render_login_page,
    "signup": render_signup_page,
    "logout": render_logout_page,
    "dashboard": render_dashboard_page,
}


def main() -> None:
    st.set_page_config(page_title=settings.app_title, page_icon="📋", layout="centered")
    apply_styles()
    init_session_state()

    page = current_page()
    user = current_user()
    with LogContextManager(request_id=get_session_id(), user_id=user.id if user else None, endpoint=page):
        if settings.debug_mode:
            log_event("page_rendered", page=page)
        PAGE_RENDERERS[page]()


if __name__ == "__main__":
    main()
