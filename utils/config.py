"""Configuration for the gym report tools.

``AppConfig`` reads every setting from the environment once, at import time
of the module that needs it (``api.app``, ``api.routes.reports``,
``dashboard.client``).  Nothing is read from files.
"""

import os
from pathlib import Path
from typing import Any, Dict


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    if raw.strip() == "*":
        return ["*"]
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """Base class for settings objects: public attributes are the settings."""

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a settings object from a plain mapping (tests, overrides)."""
        config = cls.__new__(cls)
        for key, value in data.items():
            setattr(config, key, value)
        return config


class AppConfig(Config):
    """Application settings loaded from environment variables.

    Every variable has a default so the tools work without configuration.

    Environment variables:
        APP_DB_PATH: Path to the SQLite database file (default: gym_reports.sqlite)
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        APP_DEFAULT_PAGE_SIZE: Rows per report page (default: 20)
        APP_EXPORT_MAX_ROWS: Upper bound on rows in one CSV export (default: 50000)
        APP_SLOW_REQUEST_MS: Requests slower than this are logged as slow (default: 500)
        REPORTS_API_BASE: Base URL the dashboard client talks to
            (default: http://127.0.0.1:8000/api/v1)
        REPORTS_API_TIMEOUT: Client request timeout in seconds (default: 30)
    """

    def __init__(self) -> None:
        self.db_path = Path(os.getenv("APP_DB_PATH", "gym_reports.sqlite"))
        self.api_port = _env_int("APP_PORT", 8000)
        self.api_host = os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = os.getenv("APP_LOG_FORMAT", "text").lower()
        self.cors_origins = _env_list("APP_CORS_ORIGINS", "*")
        self.default_page_size = _env_int("APP_DEFAULT_PAGE_SIZE", 20)
        self.export_max_rows = _env_int("APP_EXPORT_MAX_ROWS", 50000)
        self.slow_request_ms = _env_int("APP_SLOW_REQUEST_MS", 500)
        self.reports_api_base = os.getenv(
            "REPORTS_API_BASE", "http://127.0.0.1:8000/api/v1"
        ).rstrip("/")
        self.reports_api_timeout = float(os.getenv("REPORTS_API_TIMEOUT", "30"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
