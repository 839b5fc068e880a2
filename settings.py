from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENV = "BIRD_API_KEY"
_API_KEY_HEADER_ENV = "BIRDROOM_API_KEY_HEADER"
_PATH_PREFIX_ENV = "BIRDROOM_PATH_PREFIX"
_DATABASE_PATH_ENV = "BIRDROOM_DATABASE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_key_header: str
    path_prefix: Optional[str]
    database_path: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_prefix(default: str) -> Optional[str]:
    prefix = _read_optional_env(_PATH_PREFIX_ENV, default)
    if prefix is None:
        return None
    prefix = prefix.rstrip("/")
    if not prefix:
        return None
    return prefix if prefix.startswith("/") else f"/{prefix}"


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        # An empty secret never matches, so /op requests are refused until one is set.
        api_key=_read_str_env(_API_KEY_ENV, ""),
        api_key_header=_read_str_env(_API_KEY_HEADER_ENV, "x-api-key").lower(),
        path_prefix=_read_prefix("/birdroom"),
        database_path=_read_str_env(_DATABASE_PATH_ENV, "./tmp/birdroom.db"),
        log_level=_read_log_level("INFO"),
    )
