"""
FastAPI application factory.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from issue_tracker import __version__
from issue_tracker.api.middleware import setup_cors, setup_security_headers
from issue_tracker.api.models import HealthResponse
from issue_tracker.api.observability import ObservabilityMiddleware, generate_request_id, get_request_id
from issue_tracker.api.routes import issues as issues_routes
from issue_tracker.api.state import AppState
from issue_tracker.backend import Backend, get_backend
from issue_tracker.config import settings
from issue_tracker.exceptions import IssueTrackerError, exception_to_http_status
from issue_tracker.logging_config import log_error


def create_app(*, backend: Backend | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "state", None) is None:
            app.state.state = AppState(backend=backend or get_backend())
        yield

    app = FastAPI(
        title=f"{settings.app_title} API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if backend is not None:
        app.state.state = AppState(backend=backend)

    setup_cors(app)
    setup_security_headers(app)

    # Observability middleware (must be added last to wrap all others)
    app.add_middleware(ObservabilityMiddleware)

    @app.get("/api/health", response_model=HealthResponse)
    def health(response: Response) -> dict:
        response.headers["Cache-Control"] = "no-store"
        return {"ok": True}

    app.include_router(issues_routes.router)

    def _error_headers(request: Request) -> dict[str, str]:
        # Clients always get a request id for correlation, even on errors.
        rid = request.headers.get("x-request-id") or get_request_id() or generate_request_id()
        return {"X-Request-ID": rid, "Cache-Control": "no-store"}

    @app.exception_handler(IssueTrackerError)
    def _issue_tracker_error(request: Request, exc: IssueTrackerError) -> JSONResponse:
        status = exception_to_http_status(exc)
        headers = _error_headers(request)
        exc.request_id = headers["X-Request-ID"]
        exc.log(logging.ERROR if status >= 500 else logging.INFO)
        return JSONResponse(status_code=status, content={"error": exc.message}, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Routing errors (404, 405) use the same envelope as everything else.
        headers = {**(exc.headers or {}), **_error_headers(request)}
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=headers)

    @app.exception_handler(Exception)
    def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        headers = _error_headers(request)
        log_error("unhandled_exception", exc, request_id=headers["X-Request-ID"], path=request.url.path)
        return JSONResponse(status_code=500, content={"error": "Server error"}, headers=headers)

    return app


app = create_app()
