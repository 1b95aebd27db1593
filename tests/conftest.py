"""
Pytest configuration and shared fixtures for issue-tracker tests.
"""

from pathlib import Path

import pytest


# Add repo root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def _isolated_backend():
    """Every test starts with an empty process-wide in-memory store."""
    from issue_tracker.backend import reset_backend

    reset_backend()
    yield
    reset_backend()


@pytest.fixture
def memory_store():
    from issue_tracker.backend import InMemoryStore

    return InMemoryStore()


@pytest.fixture
def server_backend(memory_store):
    """A client that never signs in, like the API process."""
    from issue_tracker.backend import InMemoryBackend

    return InMemoryBackend(memory_store)


@pytest.fixture
def signed_in_backend(memory_store):
    """A client signed in as alice@example.com."""
    from issue_tracker.backend import InMemoryBackend

    backend = InMemoryBackend(memory_store)
    backend.sign_up("alice@example.com", "secret123")
    return backend


@pytest.fixture
def other_backend(memory_store):
    """A second signed-in client (bob) on the same store."""
    from issue_tracker.backend import InMemoryBackend

    backend = InMemoryBackend(memory_store)
    backend.sign_up("bob@example.com", "hunter22")
    return backend


@pytest.fixture
def sample_issues() -> list[dict]:
    return [
        {"title": "Login button misaligned", "description": "Overlaps the footer on mobile.", "status": "Open"},
        {"title": "Export fails", "description": "CSV export returns 500.", "status": "In Progress"},
        {"title": "Typo on pricing page", "description": "'Anual' should be 'Annual'.", "status": "Closed"},
    ]
