"""
Reusable UI components (status badge, issue rows, forms).
"""

from __future__ import annotations

import html

import streamlit as st

from issue_tracker.backend import Backend
from issue_tracker.domain import DELETE_CONFIRMATION_PROMPT, NO_ISSUES_MESSAGE, Issue, IssueStatus
from issue_tracker.ui import actions
from issue_tracker.ui.styles import badge_class


def render_status_badge(status: IssueStatus) -> None:
    st.markdown(
        f'<span class="{badge_class(status)}">{html.escape(status.value)}</span>',
        unsafe_allow_html=True,
    )


def render_error(message: str) -> None:
    if message:
        st.error(message)


def _render_edit_form(issue: Issue, backend: Backend) -> None:
    state = st.session_state
    st.text_input("Title", key=actions.EDIT_TITLE_KEY)
    st.text_area("Description", key=actions.EDIT_DESCRIPTION_KEY, height=100)
    st.selectbox("Status", IssueStatus.choices(), key=actions.EDIT_STATUS_KEY)

    save_col, cancel_col, _ = st.columns([1, 1, 4])
    with save_col:
        st.button(
            "Save",
            key=f"save_{issue.id}",
            type="primary",
            use_container_width=True,
            on_click=lambda: actions.save_edit(
                state,
                backend,
                state.get(actions.EDIT_TITLE_KEY, ""),
                state.get(actions.EDIT_DESCRIPTION_KEY, ""),
                state.get(actions.EDIT_STATUS_KEY, IssueStatus.OPEN.value),
            ),
        )
    with cancel_col:
        st.button(
            "Cancel",
            key=f"cancel_{issue.id}",
            use_container_width=True,
            on_click=actions.cancel_edit,
            args=(state,),
        )


def _render_delete_confirmation(issue: Issue, backend: Backend) -> None:
    state = st.session_state
    st.warning(DELETE_CONFIRMATION_PROMPT)
    yes_col, no_col, _ = st.columns([1, 1, 4])
    with yes_col:
        st.button(
            "Yes, delete",
            key=f"confirm_delete_{issue.id}",
            type="primary",
            use_container_width=True,
            on_click=actions.confirm_delete,
            args=(state, backend),
        )
    with no_col:
        st.button(
            "No",
            key=f"cancel_delete_{issue.id}",
            use_container_width=True,
            on_click=actions.cancel_delete,
            args=(state,),
        )


def render_issue_item(issue: Issue, backend: Backend) -> None:
    """One issue: static view, inline edit form, or delete confirmation."""
    state = st.session_state
    with st.container(border=True):
        if state.get(actions.EDITING_ID_KEY) == issue.id:
            _render_edit_form(issue, backend)
            return

        title_col, badge_col = st.columns([5, 1])
        with title_col:
            st.markdown(f"#### {issue.title}")
        with badge_col:
            render_status_badge(issue.status)
        st.markdown(
            f'<p class="issue-description">{html.escape(issue.description)}</p>',
            unsafe_allow_html=True,
        )

        if state.get(actions.PENDING_DELETE_KEY) == issue.id:
            _render_delete_confirmation(issue, backend)
            return

        edit_col, delete_col, _ = st.columns([1, 1, 4])
        with edit_col:
            st.button(
                "Edit",
                key=f"edit_{issue.id}",
                use_container_width=True,
                on_click=actions.start_edit,
                args=(state, issue),
            )
        with delete_col:
            st.button(
                "Delete",
                key=f"delete_{issue.id}",
                use_container_width=True,
                on_click=actions.request_delete,
                args=(state, issue.id),
            )


def render_issue_list(issues: list[Issue], backend: Backend) -> None:
    if not issues:
        st.caption(NO_ISSUES_MESSAGE)
        return
    for issue in issues:
        render_issue_item(issue, backend)


def render_new_issue_form(backend: Backend) -> None:
    state = st.session_state
    st.divider()
    st.markdown("## Add New Issue")
    st.text_input("Title", key=actions.NEW_TITLE_KEY, placeholder="Title")
    st.text_area("Description", key=actions.NEW_DESCRIPTION_KEY, placeholder="Description", height=120)
    st.selectbox("Status", IssueStatus.choices(), key=actions.NEW_STATUS_KEY)
    st.button(
        "Add Issue",
        type="primary",
        use_container_width=True,
        on_click=lambda: actions.add_issue(
            state,
            backend,
            state.get(actions.NEW_TITLE_KEY, ""),
            state.get(actions.NEW_DESCRIPTION_KEY, ""),
            state.get(actions.NEW_STATUS_KEY, IssueStatus.OPEN.value),
        ),
    )
