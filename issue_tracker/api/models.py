"""
Pydantic models for API responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from issue_tracker.domain import IssueStatus


class IssueResponse(BaseModel):
    """A single issue as stored by the backend."""

    id: str = Field(description="Issue identifier")
    title: str
    description: str
    status: IssueStatus = Field(description="Open, In Progress or Closed")
    user_id: Optional[str] = Field(default=None, description="Owner")
    created_at: Optional[str] = Field(default=None, description="ISO-8601 creation time")


class IssueListResponse(BaseModel):
    """Response model for the issue list."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "issues": [
                        {
                            "id": "7d0c5f7e-3c51-4b43-9d38-0d6b2c0f4c11",
                            "title": "Login button misaligned",
                            "description": "On mobile the button overlaps the footer.",
                            "status": "Open",
                            "user_id": "0b5e3a38-6a0a-4f5c-8f0f-6a4e8f1f2d10",
                            "created_at": "2025-01-03T10:00:00+00:00",
                        }
                    ]
                }
            ]
        }
    )

    issues: list[IssueResponse]


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing response."""

    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    ok: bool = True
