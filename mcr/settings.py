from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Journal
    db_path: str = os.getenv("MCR_DB_PATH", "mcr.db")
    enable_journal: bool = _env_bool("MCR_ENABLE_JOURNAL", False)
    log_level: str = os.getenv("MCR_LOG_LEVEL", "INFO")
    events_limit: int = _env_int("MCR_EVENTS_LIMIT", 100)

    # Rows
    prototype_field: str = os.getenv("MCR_PROTOTYPE_FIELD", "_prototype_name")

    # Preview service defaults
    default_allow_add: bool = _env_bool("MCR_DEFAULT_ALLOW_ADD", False)
    default_allow_delete: bool = _env_bool("MCR_DEFAULT_ALLOW_DELETE", False)
    default_delete_empty: bool = _env_bool("MCR_DEFAULT_DELETE_EMPTY", False)


settings = Settings()
