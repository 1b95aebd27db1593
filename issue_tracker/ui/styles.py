"""
UI styling (CSS injected via st.markdown).
"""

from __future__ import annotations

import streamlit as st

from issue_tracker.domain import IssueStatus, status_badge_colors


def _badge_css() -> str:
    rules = []
    for status in IssueStatus:
        background, foreground = status_badge_colors(status)
        slug = status.value.lower().replace(" ", "-")
        rules.append(f"  .status-badge.status-{slug} {{ background: {background}; color: {foreground}; }}")
    return "\n".join(rules)


BASE_CSS = """
<style>
  .stApp {
    background-color: #ffcff1;
  }

  .block-container {
    max-width: 56rem;
  }

  .status-badge {
    display: inline-block;
    font-size: 0.75rem;
    font-weight: 600;
    padding: 0.25rem 0.75rem;
    border-radius: 9999px;
    user-select: none;
  }

  .issue-description {
    white-space: pre-line;
    color: #374151;
  }

  @keyframes fadeIn {
    from { opacity: 0; transform: translateY(10px); }
    to { opacity: 1; transform: translateY(0); }
  }

  .animate-fade-in {
    animation: fadeIn 0.4s ease forwards;
  }
"""


def badge_class(status: IssueStatus) -> str:
    return f"status-badge status-{status.value.lower().replace(' ', '-')}"


def apply_styles() -> None:
    st.markdown(BASE_CSS + _badge_css() + "\n</style>", unsafe_allow_html=True)
