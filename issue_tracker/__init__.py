"""
Issue Tracker - a small multi-user issue tracker on top of a hosted backend.

Authentication and storage live in the backend service; this package holds
the Streamlit UI, the backend client and a FastAPI endpoint for listing issues.
"""

from __future__ import annotations

__version__ = "0.1.0"
