"""
HTTP client for the hosted backend (Supabase-compatible).

Auth calls go to the GoTrue API under ``/auth/v1``; table calls go to the
PostgREST API under ``/rest/v1``. After a successful sign in the session's
access token is sent with every table call, so row-level security on the
service decides which rows the user can see.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from issue_tracker.backend.models import AuthSession, AuthUser
from issue_tracker.exceptions import (
    APIConnectionError,
    APITimeoutError,
    BackendError,
    ConfigurationError,
    MissingRequiredFieldError,
)
from issue_tracker.logging_config import PerformanceTracker

logger = logging.getLogger(__name__)

SERVICE_NAME = "backend"


def _error_message(response: requests.Response) -> str:
    """Pull the service's own message out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"


def _error_type(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        value = payload.get("error_code") or payload.get("code") or payload.get("error")
        return str(value) if value else None
    return None


def _encode_filters(filters: dict[str, Any] | None) -> dict[str, str]:
    """Encode equality filters as PostgREST query params (``col=eq.value``)."""
    params: dict[str, str] = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{value}"
    return params


class SupabaseBackend:
    """
    Client for a hosted Supabase-style project.

    One instance holds at most one signed-in session. The Streamlit UI keeps
    one instance per browser session; the API keeps one server-wide instance
    that never signs in.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None,
        *,
        timeout: float = 10.0,
        http: requests.Session | None = None,
    ) -> None:
        if not url:
            raise ConfigurationError("Backend URL is not configured", setting_name="ISSUE_TRACKER_BACKEND_URL")
        if not api_key:
            raise ConfigurationError("Backend API key is not configured", setting_name="SUPABASE_ANON_KEY")
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._http = http or requests.Session()
        self.session: AuthSession | None = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, access_token: str | None = None, prefer: str | None = None) -> dict[str, str]:
        token = access_token or (self.session.access_token if self.session else None) or self._api_key
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        access_token: str | None = None,
        prefer: str | None = None,
    ) -> Any:
        try:
            with PerformanceTracker("backend_request", method=method, path=path) as tracker:
                response = self._http.request(
                    method,
                    f"{self._url}{path}",
                    params=params,
                    json=json_body,
                    headers=self._headers(access_token, prefer),
                    timeout=self._timeout,
                )
                tracker.extra["status_code"] = response.status_code
        except requests.Timeout as exc:
            raise APITimeoutError(SERVICE_NAME, timeout_seconds=self._timeout) from exc
        except requests.RequestException as exc:
            raise APIConnectionError(SERVICE_NAME, reason=str(exc)) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("Backend %s %s failed (%s): %s", method, path, response.status_code, message)
            raise BackendError(message, status_code=response.status_code, error_type=_error_type(response))

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError("Invalid response from backend", status_code=response.status_code) from exc

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def sign_up(
        self,
        email: str,
        password: str,
        *,
        email_redirect_to: str | None = None,
    ) -> AuthSession | AuthUser:
        """Register a user.

        Returns the new session when the project auto-confirms emails,
        otherwise the unconfirmed user (a confirmation email is sent).
        """
        params = {"redirect_to": email_redirect_to} if email_redirect_to else None
        payload = self._request(
            "POST",
            "/auth/v1/signup",
            params=params,
            json_body={"email": email, "password": password},
        ) or {}

        if payload.get("access_token"):
            self.session = AuthSession.from_payload(payload)
            return self.session
        user_payload = payload.get("user") if isinstance(payload.get("user"), dict) else payload
        return AuthUser.from_payload(user_payload)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        payload = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )
        self.session = AuthSession.from_payload(payload)
        logger.info("Signed in user %s", self.session.user.id)
        return self.session

    def sign_out(self) -> None:
        """Revoke the current session. The local session is dropped either way."""
        if self.session is None:
            return
        token = self.session.access_token
        try:
            self._request("POST", "/auth/v1/logout", access_token=token)
        finally:
            self.session = None

    def get_user(self, access_token: str | None = None) -> AuthUser | None:
        """Resolve the user behind ``access_token`` (default: the current session)."""
        token = access_token or (self.session.access_token if self.session else None)
        if not token:
            return None
        try:
            payload = self._request("GET", "/auth/v1/user", access_token=token)
        except BackendError as exc:
            if exc.status_code in (401, 403):
                return None
            raise
        return AuthUser.from_payload(payload)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> list[dict[str, Any]]:
        params = {"select": "*", **_encode_filters(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        return self._request("GET", f"/rest/v1/{table}", params=params) or []

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return self._request(
            "POST",
            f"/rest/v1/{table}",
            json_body=rows,
            prefer="return=representation",
        ) or []

    def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        if not filters:
            raise MissingRequiredFieldError("filters")
        return self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=_encode_filters(filters),
            json_body=values,
            prefer="return=representation",
        ) or []

    def delete(self, table: str, *, filters: dict[str, Any]) -> list[dict[str, Any]]:
        if not filters:
            raise MissingRequiredFieldError("filters")
        return self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=_encode_filters(filters),
            prefer="return=representation",
        ) or []
