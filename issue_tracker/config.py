"""
Issue Tracker - Configuration Management
========================================
Centralized configuration with environment variable support.

Usage:
    from issue_tracker.config import settings

    url = settings.backend_url
    redirect = settings.email_redirect_url
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings with environment variable overrides."""

    # Backend service (auth + tables). Empty URL selects the in-memory backend.
    backend_url: str = ""
    issues_table: str = "issues"
    request_timeout_seconds: float = 10.0

    # Where signup confirmation links send the user
    email_redirect_url: str = "http://localhost:8501/?page=login"

    # Public URL of the issues API (used by the UI links and docs)
    api_url: str = "http://localhost:8000"

    # Identity on the issues endpoint. When enabled, requests must carry a
    # bearer token that resolves to the user named in x-user-id.
    require_access_token: bool = False

    # Reverse proxy / client IP extraction
    trust_proxy_headers: bool = False
    trusted_proxy_ips: set[str] = field(default_factory=set)

    # CORS configuration
    # Example: CORS_ALLOW_ORIGINS="https://issues.example.com,https://app.example.com"
    cors_allow_origins: set[str] = field(
        default_factory=lambda: {
            "http://localhost",
            "http://localhost:8501",  # Streamlit default
            "http://127.0.0.1",
            "http://127.0.0.1:8501",
        }
    )
    cors_allow_credentials: bool = False
    cors_max_age: int = 600  # 10 minutes

    csp_use_nonce: bool = True

    app_title: str = "Issue Tracker"

    debug_mode: bool = False

    def __post_init__(self):
        """Load overrides from environment variables."""
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration from environment variables."""
        # Backend
        if backend_url := (os.environ.get("ISSUE_TRACKER_BACKEND_URL") or os.environ.get("SUPABASE_URL")):
            self.backend_url = backend_url.rstrip("/")
        if table := os.environ.get("ISSUES_TABLE"):
            self.issues_table = table
        if timeout := os.environ.get("BACKEND_TIMEOUT_SECONDS"):
            self.request_timeout_seconds = float(timeout)

        if redirect := os.environ.get("ISSUE_TRACKER_EMAIL_REDIRECT_URL"):
            self.email_redirect_url = redirect
        if api_url := os.environ.get("ISSUE_TRACKER_API_URL"):
            self.api_url = api_url.rstrip("/")

        if os.environ.get("ISSUE_TRACKER_REQUIRE_ACCESS_TOKEN", "").lower() in ("1", "true", "yes"):
            self.require_access_token = True

        # Reverse proxy / headers
        if os.environ.get("TRUST_PROXY_HEADERS", "").lower() in ("1", "true", "yes"):
            self.trust_proxy_headers = True
        if trusted := os.environ.get("TRUSTED_PROXY_IPS", "").strip():
            self.trusted_proxy_ips = {ip.strip() for ip in trusted.split(",") if ip.strip()}

        # CORS configuration - requires explicit configuration
        if cors_origins := os.environ.get("CORS_ALLOW_ORIGINS", "").strip():
            if cors_origins == "*":
                logger.warning(
                    "CORS_ALLOW_ORIGINS set to '*' - allowing all origins. " "This should only be used in development."
                )
                self.cors_allow_origins = {"*"}
            else:
                self.cors_allow_origins = {origin.strip() for origin in cors_origins.split(",") if origin.strip()}
        if cors_max_age := os.environ.get("CORS_MAX_AGE"):
            self.cors_max_age = int(cors_max_age)

        if os.environ.get("CSP_USE_NONCE", "").lower() in ("0", "false", "no"):
            self.csp_use_nonce = False

        if title := os.environ.get("ISSUE_TRACKER_TITLE"):
            self.app_title = title

        if os.environ.get("DEBUG", "").lower() in ("1", "true"):
            self.debug_mode = True

    @property
    def backend_anon_key(self) -> str | None:
        """Public (anon) key for the backend service (never stored in config)."""
        return os.environ.get("SUPABASE_ANON_KEY") or os.environ.get("ISSUE_TRACKER_ANON_KEY")

    @property
    def backend_service_key(self) -> str | None:
        """Service-role key for server-side calls (never stored in config)."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @property
    def uses_hosted_backend(self) -> bool:
        return bool(self.backend_url)


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if _settings.debug_mode:
            logger.info("Settings loaded with debug mode enabled")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings()
    return _settings


# Convenience alias
settings = get_settings()
