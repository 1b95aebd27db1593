from __future__ import annotations

from dataclasses import dataclass

from issue_tracker.backend import Backend
from issue_tracker.repository import IssueRepo


@dataclass
class AppState:
    backend: Backend
    issue_repo: IssueRepo | None = None
