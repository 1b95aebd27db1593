"""
Request tracking for the API.

Assigns a request ID to every request, times it, and writes structured
start/completion log lines carrying the client IP and the asserted user ID.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from issue_tracker.api.middleware import get_client_ip as get_client_ip_safe
from issue_tracker.exceptions import IssueTrackerError
from issue_tracker.logging_config import LogContext, get_logger, log_error

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

logger = get_logger(__name__)

SENSITIVE_QUERY_PARAMS = {"api_key", "apikey", "token", "access_token", "password", "secret"}


def generate_request_id() -> str:
    return str(uuid.uuid4())


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return _request_id_ctx.get()


def sanitize_query_params(query: str) -> str:
    """Redact sensitive values from a raw query string before logging."""
    sanitized = []
    for part in query.split("&"):
        key = part.split("=", 1)[0]
        if "=" in part and key.lower() in SENSITIVE_QUERY_PARAMS:
            sanitized.append(f"{key}=***REDACTED***")
        else:
            sanitized.append(part)
    return "&".join(sanitized)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request observability.

    - Uses the incoming X-Request-ID or generates one
    - Echoes it in the X-Request-ID response header
    - Logs request_started / request_completed with duration_ms
    - Flags requests slower than ``slow_request_threshold_ms``
    """

    def __init__(self, app: ASGIApp, *, slow_request_threshold_ms: float = 1000.0) -> None:
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or generate_request_id()
        client_ip = get_client_ip_safe(request)
        user_id = (request.headers.get("x-user-id") or "").strip() or None

        _request_id_ctx.set(request_id)
        LogContext.set_request_id(request_id)
        LogContext.set_client_ip(client_ip)
        LogContext.set_user_id(user_id)
        LogContext.set_endpoint(str(request.url.path))

        request_meta: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "user_agent": request.headers.get("user-agent"),
        }
        if request.url.query:
            request_meta["query_params"] = sanitize_query_params(str(request.url.query))
        logger.info("request_started", extra=request_meta)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            if isinstance(exc, IssueTrackerError):
                exc.request_id = request_id
                exc.log()
            else:
                log_error(
                    "request_failed",
                    exc,
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round(duration_ms, 2),
                )
            raise
        finally:
            LogContext.clear()

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        response_meta: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        if hasattr(request.state, "result_count"):
            response_meta["result_count"] = request.state.result_count

        if duration_ms >= self.slow_request_threshold_ms:
            response_meta["slow_request"] = True
            logger.warning("request_completed_slow", extra=response_meta)
        else:
            logger.info("request_completed", extra=response_meta)
        return response
