"""
Configuration helpers for the roster backend.

Exposes a Settings object that reads environment variables (storage backend,
data file, slot key, database URL, log level) so that services and routers
do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE_NAME = "data.json"
DEFAULT_STORAGE_KEY = "students_v1"
STORAGE_BACKENDS = {"json", "sql"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: Path
    storage_key: str
    database_url: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _backend(value: str | None) -> str:
        name = (value or "").strip().lower()
        return name if name in STORAGE_BACKENDS else "json"

    data_file = (os.getenv("ROSTER_DATA_FILE") or "").strip()

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        storage_backend=_backend(os.getenv("ROSTER_STORAGE_BACKEND")),
        data_file=Path(data_file) if data_file else Path.cwd() / DEFAULT_DATA_FILE_NAME,
        storage_key=(os.getenv("ROSTER_STORAGE_KEY") or "").strip() or DEFAULT_STORAGE_KEY,
        database_url=os.getenv("DATABASE_URL", ""),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
