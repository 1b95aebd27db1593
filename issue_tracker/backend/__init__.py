"""
Backend clients (auth + table storage).

``create_backend`` picks the hosted client when a backend URL is configured
and the in-memory one otherwise. Each call returns a fresh client with no
signed-in session; in-memory clients share one process-wide store.
"""

from __future__ import annotations

import logging
from typing import Union

from issue_tracker.backend.client import SupabaseBackend
from issue_tracker.backend.memory import InMemoryBackend, InMemoryStore
from issue_tracker.backend.models import AuthSession, AuthUser
from issue_tracker.config import Settings, get_settings

logger = logging.getLogger(__name__)

Backend = Union[SupabaseBackend, InMemoryBackend]

_memory_store: InMemoryStore | None = None
_backend: Backend | None = None


def _shared_memory_store() -> InMemoryStore:
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryStore()
    return _memory_store


def create_backend(config: Settings | None = None, *, server: bool = False) -> Backend:
    """
    Build a backend client from settings.

    Args:
        config: Settings to use (defaults to the global settings).
        server: Use the service-role key when one is set (API process).
    """
    config = config or get_settings()
    if not config.uses_hosted_backend:
        logger.warning("No backend URL configured, using in-memory storage")
        return InMemoryBackend(_shared_memory_store())

    api_key = config.backend_anon_key
    if server and config.backend_service_key:
        api_key = config.backend_service_key
    return SupabaseBackend(config.backend_url, api_key, timeout=config.request_timeout_seconds)


def get_backend() -> Backend:
    """Get the process-wide server backend."""
    global _backend
    if _backend is None:
        _backend = create_backend(server=True)
    return _backend


def reset_backend() -> None:
    """Drop the process-wide backend and in-memory data."""
    global _backend, _memory_store
    _backend = None
    _memory_store = None


__all__ = [
    "AuthSession",
    "AuthUser",
    "Backend",
    "InMemoryBackend",
    "InMemoryStore",
    "SupabaseBackend",
    "create_backend",
    "get_backend",
    "reset_backend",
]
