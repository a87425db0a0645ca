"""
Runtime settings, resolved once at startup from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .connection_string import normalize_connection_string

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    connection_string: str
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def raw_connection_string(configured: str | None = None) -> str:
    """
    Application configuration first, then `DATABASE_URL`.
    """
    candidates = (
        (configured or "").strip(),
        _env("CONNECTIONSTRINGS__DEFAULTCONNECTION"),
        _env("DATABASE_URL"),
    )
    for candidate in candidates:
        if candidate:
            return candidate
    raise ConfigurationError("Database connection string not found.")


def cors_origins() -> tuple[str, ...]:
    raw = _env("CORS_ORIGINS")
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def load_settings(connection_string: str | None = None) -> Settings:
    return Settings(
        connection_string=normalize_connection_string(raw_connection_string(connection_string)),
        cors_origins=cors_origins(),
        log_level=_env("LOG_LEVEL").upper() or "INFO",
    )
