"""
Streamlit UI package.

Pages render widgets; `issue_tracker.ui.actions` holds the Streamlit-free
handlers they call.
"""

from __future__ import annotations
