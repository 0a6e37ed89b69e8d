"""
API configuration loaded from environment or defaults.
"""

import os
from pathlib import Path
from typing import Optional


def get_database_url() -> str:
    """Get SQLAlchemy database URL from env, or the default SQLite file."""
    value = os.getenv("DATABASE_URL", "").strip()
    if not value:
        path = Path(__file__).resolve().parents[2] / "data" / "cinelist.db"
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path}"
    if "://" not in value:
        # Plain file path
        return f"sqlite:///{os.path.abspath(value)}"
    return value


def get_log_level() -> str:
    """Get log level from env or default."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_api_host() -> str:
    """Get API host for binding."""
    return os.getenv("API_HOST", "0.0.0.0")


def get_api_port() -> int:
    """Get API port."""
    return int(os.getenv("API_PORT", "8000"))


def get_omdb_api_key() -> Optional[str]:
    """Get OMDb API key from env."""
    return os.getenv("OMDB_API_KEY") or None


def get_omdb_base_url() -> str:
    """Get OMDb base URL."""
    return os.getenv("OMDB_BASE_URL", "https://www.omdbapi.com/")


def get_omdb_timeout() -> float:
    """Get OMDb request timeout in seconds."""
    return float(os.getenv("OMDB_TIMEOUT", "10"))
