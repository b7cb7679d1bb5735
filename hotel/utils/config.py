"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


ONE_DAY_NANOSECONDS = 24 * 60 * 60 * 1_000_000_000

_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    database_path: Path
    max_room_bytes: int
    default_stay_nanoseconds: int
    enforce_room_ownership: bool
    host: str
    port: int


def validate_settings(settings: Settings) -> None:
    if settings.max_room_bytes <= 0:
        raise ValueError("max_room_bytes must be > 0")
    if settings.default_stay_nanoseconds <= 0:
        raise ValueError("default_stay_nanoseconds must be > 0")
    if not 0 < settings.port < 65536:
        raise ValueError("port must be in (0, 65536)")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process; call ``cache_clear`` to reload."""
    settings = Settings(
        app_name=os.getenv("APP_NAME", "Shared Room Booking"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        database_path=Path(os.getenv("ROOM_DATABASE_PATH", "data/rooms.db")),
        max_room_bytes=_env_int("ROOM_MAX_BYTES", 1000),
        default_stay_nanoseconds=_env_int("ROOM_STAY_NANOSECONDS", ONE_DAY_NANOSECONDS),
        enforce_room_ownership=_env_bool("ROOM_ENFORCE_OWNERSHIP", False),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8000),
    )
    validate_settings(settings)
    return settings
