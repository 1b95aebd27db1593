"""
Repository module for issue persistence.
"""

from __future__ import annotations

from issue_tracker.repository.issues import IssueRepo

__all__ = ["IssueRepo"]
