from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)
_SETTINGS: Settings | None = None

DEFAULT_SCHEDULE_BASE_URL = "https://cdn.espn.com/core/nfl/schedule"
DEFAULT_SEASON_YEAR = 2024
DEFAULT_WEEK = 1
DEFAULT_USER_AGENT = "gameday/1.0 (+https://example.local)"


@dataclass(frozen=True)
class Settings:
    schedule_base_url: str
    season_year: int
    default_week: int
    connect_timeout_seconds: int
    read_timeout_seconds: int
    user_agent: str
    load_on_startup: bool


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes"}


def load_settings() -> Settings:
    return Settings(
        schedule_base_url=(
            os.getenv("SCHEDULE_BASE_URL") or DEFAULT_SCHEDULE_BASE_URL
        ).rstrip("/"),
        season_year=_env_int("SCHEDULE_YEAR", DEFAULT_SEASON_YEAR),
        default_week=_env_int("SCHEDULE_DEFAULT_WEEK", DEFAULT_WEEK),
        connect_timeout_seconds=_env_int("SCHEDULE_CONNECT_TIMEOUT_SECONDS", 5),
        read_timeout_seconds=_env_int("SCHEDULE_READ_TIMEOUT_SECONDS", 15),
        user_agent=os.getenv("SCHEDULE_USER_AGENT") or DEFAULT_USER_AGENT,
        load_on_startup=_env_bool("SCHEDULE_LOAD_ON_STARTUP", True),
    )


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _SETTINGS
    _SETTINGS = None
