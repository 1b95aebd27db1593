"""
In-memory backend with the same surface as ``SupabaseBackend``.

Used when no hosted project is configured (local development) and in tests.
Data lives only as long as the process.
"""

from __future__ import annotations

import copy
import logging
import secrets
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from issue_tracker.backend.models import AuthSession, AuthUser
from issue_tracker.exceptions import BackendError, MissingRequiredFieldError

logger = logging.getLogger(__name__)

# Messages mirror the hosted service so the UI shows the same text.
USER_EXISTS_MESSAGE = "User already registered"
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"
WEAK_PASSWORD_MESSAGE = "Password should be at least 6 characters"


class InMemoryStore:
    """Users, tokens and table rows shared by every client of one process."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users: dict[str, tuple[AuthUser, str]] = {}
        self.tokens: dict[str, AuthUser] = {}
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.last_created_at: datetime | None = None

    def next_timestamp(self) -> str:
        """Strictly increasing creation timestamp."""
        now = datetime.now(timezone.utc)
        if self.last_created_at is not None and now <= self.last_created_at:
            now = self.last_created_at + timedelta(microseconds=1)
        self.last_created_at = now
        return now.isoformat()


def _matches(row: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    return all(row.get(column) == value for column, value in (filters or {}).items())


class InMemoryBackend:
    """
    Process-local stand-in for the hosted backend.

    Like the hosted service's row-level security, a signed-in client only
    sees rows whose ``user_id`` is its own. A client that never signs in
    (the API server) sees every row.
    """

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()
        self.session: AuthSession | None = None

    @property
    def store(self) -> InMemoryStore:
        return self._store

    def _new_session(self, user: AuthUser) -> AuthSession:
        token = secrets.token_urlsafe(24)
        self._store.tokens[token] = user
        return AuthSession(access_token=token, refresh_token=secrets.token_urlsafe(24), user=user)

    def _visible(self, row: dict[str, Any]) -> bool:
        if self.session is None:
            return True
        return row.get("user_id") == self.session.user.id

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
        email = (email or "").strip().lower()
        if not email:
            raise BackendError("Anonymous sign-ins are disabled", status_code=422)
        if len(password or "") < 6:
            raise BackendError(WEAK_PASSWORD_MESSAGE, status_code=422, error_type="weak_password")
        with self._store.lock:
            if email in self._store.users:
                raise BackendError(USER_EXISTS_MESSAGE, status_code=422, error_type="user_already_exists")
            user = AuthUser(id=str(uuid.uuid4()), email=email)
            self._store.users[email] = (user, password)
        logger.info("Registered user %s (redirect=%s)", user.id, email_redirect_to)
        # Local accounts are confirmed immediately.
        self.session = self._new_session(user)
        return self.session

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()
        with self._store.lock:
            entry = self._store.users.get(email)
            if entry is None or entry[1] != password:
                raise BackendError(INVALID_CREDENTIALS_MESSAGE, status_code=400, error_type="invalid_credentials")
            self.session = self._new_session(entry[0])
        return self.session

    def sign_out(self) -> None:
        if self.session is None:
            return
        with self._store.lock:
            self._store.tokens.pop(self.session.access_token, None)
        self.session = None

    def get_user(self, access_token: str | None = None) -> AuthUser | None:
        token = access_token or (self.session.access_token if self.session else None)
        if not token:
            return None
        return self._store.tokens.get(token)

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
        with self._store.lock:
            rows = [
                copy.deepcopy(row)
                for row in self._store.tables.get(table, [])
                if self._visible(row) and _matches(row, filters)
            ]
        if order_by:
            rows.sort(key=lambda row: (row.get(order_by) is None, row.get(order_by) or ""), reverse=not ascending)
        return rows

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        inserted = []
        with self._store.lock:
            target = self._store.tables.setdefault(table, [])
            for row in rows:
                record = dict(row)
                record.setdefault("id", str(uuid.uuid4()))
                record.setdefault("created_at", self._store.next_timestamp())
                if self.session is not None:
                    record.setdefault("user_id", self.session.user.id)
                    if record["user_id"] != self.session.user.id:
                        raise BackendError(
                            f'new row violates row-level security policy for table "{table}"',
                            status_code=403,
                            error_type="42501",
                        )
                target.append(record)
                inserted.append(copy.deepcopy(record))
        return inserted

    def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        if not filters:
            raise MissingRequiredFieldError("filters")
        updated = []
        with self._store.lock:
            for row in self._store.tables.get(table, []):
                if self._visible(row) and _matches(row, filters):
                    row.update(values)
                    updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table: str, *, filters: dict[str, Any]) -> list[dict[str, Any]]:
        if not filters:
            raise MissingRequiredFieldError("filters")
        kept: list[dict[str, Any]] = []
        removed: list[dict[str, Any]] = []
        with self._store.lock:
            for row in self._store.tables.get(table, []):
                (removed if self._visible(row) and _matches(row, filters) else kept).append(row)
            self._store.tables[table] = kept
        return removed
