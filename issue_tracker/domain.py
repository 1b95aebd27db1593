from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from issue_tracker.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6

NOT_LOGGED_IN_MESSAGE = "Not logged in"
FILL_ALL_FIELDS_MESSAGE = "Please fill in all fields"
PASSWORD_TOO_SHORT_MESSAGE = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
DELETE_CONFIRMATION_PROMPT = "Are you sure you want to delete this issue?"
SIGNUP_CONFIRMATION_MESSAGE = "Check your email for confirmation"
NO_ISSUES_MESSAGE = "No issues found."


class IssueStatus(str, Enum):
    """Workflow state of an issue; values are the strings stored in the table."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"

    @classmethod
    def parse(cls, value: Any) -> IssueStatus:
        """Return the status for ``value`` (a member or its display string).

        Raises:
            ValidationError: if the value is not a known status.
        """
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value == value:
                return status
        raise ValidationError(f"Unknown status: {value!r}", field="status")

    @classmethod
    def choices(cls) -> list[str]:
        return [status.value for status in cls]


# Badge (background, text) colors per status
STATUS_BADGE_COLORS: dict[IssueStatus, tuple[str, str]] = {
    IssueStatus.OPEN: ("#dbeafe", "#1e40af"),
    IssueStatus.IN_PROGRESS: ("#fef9c3", "#854d0e"),
    IssueStatus.CLOSED: ("#fee2e2", "#991b1b"),
}


def status_badge_colors(status: Any) -> tuple[str, str]:
    """Return (background, foreground) colors for a status badge.

    Unknown statuses render grey rather than failing the whole list.
    """
    try:
        return STATUS_BADGE_COLORS[IssueStatus.parse(status)]
    except ValidationError:
        return ("#f3f4f6", "#374151")


@dataclass
class Issue:
    id: str
    title: str
    description: str
    status: IssueStatus = IssueStatus.OPEN
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Issue:
        """Build an issue from a table row. Extra columns are ignored."""
        return cls(
            id=str(record["id"]),
            title=record.get("title") or "",
            description=record.get("description") or "",
            status=IssueStatus.parse(record.get("status") or IssueStatus.OPEN.value),
            user_id=record.get("user_id"),
            created_at=record.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


def validate_issue_fields(title: str | None, description: str | None) -> tuple[str, str]:
    """Check that both fields are filled in and return them stripped.

    Raises:
        ValidationError: with ``FILL_ALL_FIELDS_MESSAGE`` if either is blank.
    """
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise ValidationError(FILL_ALL_FIELDS_MESSAGE)
    return title, description


def validate_credentials(email: str | None, password: str | None) -> None:
    """Client-side check run before any auth request.

    Only the password length is checked; the backend validates the rest.
    """
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(PASSWORD_TOO_SHORT_MESSAGE, field="password")

