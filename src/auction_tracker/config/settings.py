"""Environment-driven settings for the tracker."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "AUCTION_TRACKER_DB_PATH"
_STATE_KEY_ENV = "AUCTION_TRACKER_STATE_KEY"
_LOG_LEVEL_ENV = "AUCTION_TRACKER_LOG_LEVEL"

DEFAULT_STATE_KEY = "auction_tracker_v1"
DEFAULT_DB_PATH = Path.home() / ".auction_tracker" / "auction_tracker.sqlite"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    db_path: Path | str
    state_key: str
    log_level: str


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value:
        logger.warning("Empty value for %s; using default %s", name, default)
        return default
    return value


def _env_log_level(name: str, default: str) -> str:
    value = _env_str(name, default).upper()
    if not isinstance(logging.getLevelName(value), int):
        logger.warning("Invalid log level for %s: %s; using default %s", name, value, default)
        return default
    return value


def db_path_from_env() -> Path | str:
    """Database location; a ``file:`` value is kept verbatim as an SQLite URI."""

    raw = _env_str(_DB_PATH_ENV, "")
    if not raw:
        return DEFAULT_DB_PATH
    if raw.startswith("file:"):
        return raw
    return Path(raw).expanduser()


def load_settings() -> Settings:
    return Settings(
        db_path=db_path_from_env(),
        state_key=_env_str(_STATE_KEY_ENV, DEFAULT_STATE_KEY),
        log_level=_env_log_level(_LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
    )
