"""
Configuration helpers for the vault backend.

Exposes a Settings object that reads environment variables (environment,
storage backend, data paths, upload limits, logging) so that routers and
services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"
STORAGE_BACKENDS = {"json", "sql"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: Path
    database_url: str
    log_level: str
    max_upload_bytes: int
    session_cookie_max_age: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in STORAGE_BACKENDS:
        backend = "json"
    data_file = (os.getenv("DATA_FILE") or "").strip()

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=backend,
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        database_url=os.getenv("DATABASE_URL", ""),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", "2097152"), 2 * 1024 * 1024),
        session_cookie_max_age=_int(os.getenv("SESSION_COOKIE_MAX_AGE", "2592000"), 30 * 24 * 60 * 60),
    )
