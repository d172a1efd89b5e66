"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    pass


class Settings(BaseSettings):
    """All configuration for the emissions dashboard.

    Values are loaded from environment variables or a .env file.
    ``analysis_url`` and ``rerun_secret_key`` have no default: building
    ``Settings()`` without them fails, so a misconfigured deployment stops
    at startup instead of on the first request.
    """

    # Application
    app_name: str = "emissions-dashboard"
    debug: bool = False

    # Store. The privileged URL is used for every write; the read URL (if
    # set) backs the dashboard views.
    database_url: str = "sqlite:///./data/emissions_dashboard.db"
    database_read_url: Optional[str] = None

    # Document-analysis service
    analysis_url: str
    analysis_timeout_seconds: Optional[float] = None  # None → wait indefinitely

    # Shared secret guarding add-company and re-run
    rerun_secret_key: str

    allowed_origins: list[str] = ["http://localhost:8501"]

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }

    @property
    def read_database_url(self) -> str:
        return self.database_read_url or self.database_url
