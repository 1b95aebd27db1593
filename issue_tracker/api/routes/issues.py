"""
Issue routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from issue_tracker.api.dependencies import get_backend_for_request, get_issue_repo
from issue_tracker.api.models import ErrorResponse, IssueListResponse
from issue_tracker.config import settings
from issue_tracker.exceptions import AuthenticationError

router = APIRouter(prefix="/api", tags=["issues"])


def _extract_user_id(request: Request) -> str:
    """
    Extract the caller's user ID from the X-User-ID header.

    The header is client-asserted; see ``_verify_identity`` for the optional
    bearer-token check.
    """
    user_id = (request.headers.get("x-user-id") or "").strip()
    if not user_id:
        raise AuthenticationError("Unauthorized: user ID missing")
    return user_id[:255]


def _extract_bearer_token(request: Request) -> str | None:
    scheme, _, token = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _verify_identity(request: Request, user_id: str) -> None:
    """Check that a presented access token belongs to ``user_id``."""
    token = _extract_bearer_token(request)
    if token is None:
        if settings.require_access_token:
            raise AuthenticationError("Unauthorized: access token missing")
        return

    user = get_backend_for_request(request).get_user(access_token=token)
    if user is None or user.id != user_id:
        raise AuthenticationError("Unauthorized: identity mismatch")


@router.get(
    "/issues",
    response_model=IssueListResponse,
    responses={
        200: {"description": "Issues owned by the user, newest first"},
        401: {"model": ErrorResponse, "description": "X-User-ID header missing or not verified"},
        500: {"model": ErrorResponse, "description": "Backend failure"},
    },
)
def list_issues(request: Request, response: Response) -> dict:
    """
    List the issues of the user named in the X-User-ID header.
    """
    user_id = _extract_user_id(request)
    _verify_identity(request, user_id)

    issues = get_issue_repo(request).list_for_user(user_id)
    request.state.result_count = len(issues)

    response.headers["Cache-Control"] = "no-store"
    return {"issues": [issue.to_dict() for issue in issues]}
