"""Configuration helpers for the alert storage engine."""

from __future__ import annotations

import os
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

DEFAULT_DB_PATH = "~/.alert_storage/alerts.db"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _candidate_env_paths(start: Path) -> Iterable[Path]:
    """Yield plausible .env locations from closest to farthest."""
    override = os.environ.get("ALERT_STORAGE_ENV_FILE")
    if override:
        yield Path(override).expanduser()

    for directory in (start, *start.parents):
        yield directory / ".env"


def _discover_env_path() -> Path | None:
    """Return the first .env path that exists, if any."""
    package_dir = Path(__file__).resolve().parent
    for candidate in _candidate_env_paths(package_dir):
        if candidate.exists():
            return candidate
    return None


def load_env_file(path: Path | None = None) -> None:
    """Populate os.environ with values from a .env file if present."""
    env_path = path or _discover_env_path()
    if env_path is None or not env_path.exists():
        logger.debug("No .env file discovered for configuration")
        return

    logger.bind(path=str(env_path)).info("Loading environment variables from .env")
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        # Existing environment variables win over the file.
        os.environ.setdefault(key, value)


class StorageSettings(BaseModel):
    """Configuration values for the alert database."""

    db_path: str = Field(default=DEFAULT_DB_PATH)
    echo: bool = Field(default=False)

    @classmethod
    def load(cls) -> StorageSettings:
        load_env_file()
        settings = cls(
            db_path=os.getenv("ALERT_STORAGE_DB_PATH", DEFAULT_DB_PATH),
            echo=_parse_bool(os.getenv("ALERT_STORAGE_DB_ECHO", "false")),
        )
        logger.bind(db_path=settings.db_path, echo=settings.echo).debug(
            "Storage configuration loaded from environment"
        )
        return settings

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Return cached storage settings."""
    return StorageSettings.load()
