"""Service settings loaded from environment variables (+ optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv(override=False)

ENV_PREFIX = "TASKS"

STORAGE_BACKENDS = ("sql", "redis")


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return tuple(default)
    return tuple(p.strip() for p in raw.replace(",", " ").split() if p.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str = "task-service"
    log_level: str = "INFO"

    storage_backend: str = "sql"
    database_url: str = "sqlite:///./tasks.db"
    database_echo: bool = False

    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0

    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)

    host: str = "0.0.0.0"
    port: int = 8080

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "task-service"),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
            storage_backend=_env(_k("STORAGE_BACKEND"), "sql").lower(),
            database_url=_env(_k("DATABASE_URL"), "sqlite:///./tasks.db"),
            database_echo=_env_bool(_k("DATABASE_ECHO"), False),
            redis_host=_env("REDIS_HOST", "redis"),
            redis_port=_env_int("REDIS_PORT", 6379),
            redis_db=_env_int("REDIS_DB", 0),
            cors_origins=_env_list(_k("CORS_ORIGINS"), ("http://localhost:3000",)),
            host=_env(_k("HOST"), "0.0.0.0"),
            port=_env_int(_k("PORT"), 8080),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
