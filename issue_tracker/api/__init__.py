"""
Issue Tracker API package.

Public exports:
- create_app: FastAPI factory
- app: default global FastAPI instance (for `uvicorn issue_tracker.api:app`)
- AppState: app.state container used by tests
"""

from __future__ import annotations

from issue_tracker.api.app import app, create_app
from issue_tracker.api.state import AppState

__all__ = ["AppState", "app", "create_app"]
