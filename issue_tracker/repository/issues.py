"""
Issue repository on top of the backend's ``issues`` table.

Ownership checks are the backend's job (row-level security); this layer only
validates input, shapes rows into ``Issue`` objects and applies ordering.
"""

from __future__ import annotations

import logging
from typing import Any

from issue_tracker.backend import Backend
from issue_tracker.config import settings
from issue_tracker.domain import Issue, IssueStatus, validate_issue_fields
from issue_tracker.exceptions import BackendError, ValidationError
from issue_tracker.logging_config import log_event

logger = logging.getLogger(__name__)


class IssueRepo:
    """
    Create, list, update and delete issues for a user.

    Every method is one round trip to the backend; errors propagate as
    ``IssueTrackerError`` subclasses.
    """

    def __init__(self, backend: Backend, table: str | None = None) -> None:
        self._backend = backend
        self._table = table or settings.issues_table

    @property
    def backend(self) -> Backend:
        return self._backend

    def list_for_user(self, user_id: str) -> list[Issue]:
        """Get a user's issues, newest first."""
        if not user_id:
            return []
        rows = self._backend.select(
            self._table,
            filters={"user_id": user_id},
            order_by="created_at",
            ascending=False,
        )
        # Unreadable stored rows surface as backend failures.
        try:
            return [Issue.from_record(row) for row in rows]
        except ValidationError as exc:
            raise BackendError(exc.message, error_type="invalid_record") from exc
        except KeyError as exc:
            raise BackendError(f"Issue record missing column: {exc}", error_type="invalid_record") from exc

    def create(
        self,
        user_id: str,
        title: str,
        description: str,
        status: IssueStatus | str = IssueStatus.OPEN,
    ) -> Issue | None:
        """Insert a new issue. Returns it when the backend echoes the row."""
        title, description = validate_issue_fields(title, description)
        record: dict[str, Any] = {
            "user_id": user_id,
            "title": title,
            "description": description,
            "status": IssueStatus.parse(status).value,
        }
        rows = self._backend.insert(self._table, [record])
        created = Issue.from_record(rows[0]) if rows else None
        log_event("issue_created", user_id=user_id, issue_id=created.id if created else None)
        return created

    def update(
        self,
        issue_id: str,
        title: str,
        description: str,
        status: IssueStatus | str,
    ) -> Issue | None:
        """Update title, description and status of an issue by id."""
        title, description = validate_issue_fields(title, description)
        rows = self._backend.update(
            self._table,
            {
                "title": title,
                "description": description,
                "status": IssueStatus.parse(status).value,
            },
            filters={"id": issue_id},
        )
        if not rows:
            logger.info("Update of issue %s matched no rows", issue_id)
            return None
        log_event("issue_updated", issue_id=issue_id)
        return Issue.from_record(rows[0])

    def delete(self, issue_id: str) -> None:
        self._backend.delete(self._table, filters={"id": issue_id})
        log_event("issue_deleted", issue_id=issue_id)
