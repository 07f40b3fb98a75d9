from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_DATA_ROOT_ENV = "WEATHER_DATA_ROOT"
_TIMEZONE_ENV = "WEATHER_TIMEZONE"
_STRICT_RANGES_ENV = "WEATHER_STRICT_RANGES"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    data_root: str
    timezone: Optional[str]
    strict_ranges: bool
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


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


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
        data_root=_read_str_env(_DATA_ROOT_ENV, "./tmp/weather"),
        timezone=_read_optional_env(_TIMEZONE_ENV, None),
        strict_ranges=_read_bool_env(_STRICT_RANGES_ENV, False),
        log_level=_read_log_level("INFO"),
    )
