from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any

from .settings import settings

logger = logging.getLogger("mcr")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _resolve_db_path() -> str:
    """Return a file path usable by sqlite.

    If the configured path is a directory (e.g. a bind mount that did not
    exist yet), the database file is placed inside it.
    """
    p = os.path.abspath(settings.db_path)

    if os.path.isdir(p):
        p = os.path.join(p, "mcr.db")

    parent = os.path.dirname(p)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)

    return p


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(_resolve_db_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the events table if it does not exist."""
    with connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS events (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              ts TEXT NOT NULL,
              level TEXT NOT NULL,
              form_name TEXT,
              row_key TEXT,
              message TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_events_ts ON events(ts);
            """
        )


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=_LEVELS.get((level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_event(level: str, message: str, form_name: str | None = None, row_key: str | None = None) -> None:
    """Log through the ``mcr`` logger and, if enabled, record the event in the journal."""
    level = level.upper()
    prefix = f"[{form_name}] " if form_name else ""
    suffix = f" (row {row_key!r})" if row_key is not None else ""
    logger.log(_LEVELS.get(level, logging.INFO), "%s%s%s", prefix, message, suffix)

    if not settings.enable_journal:
        return
    try:
        with connect() as conn:
            conn.execute(
                "INSERT INTO events (ts, level, form_name, row_key, message) VALUES (?, ?, ?, ?, ?)",
                (utc_now(), level, form_name, row_key, message),
            )
    except sqlite3.Error as e:
        logger.warning("Journal write failed: %s: %s", type(e).__name__, e)


def latest_events(limit: int = 100) -> list[dict[str, Any]]:
    if not settings.enable_journal:
        return []
    with connect() as conn:
        rows = conn.execute("SELECT * FROM events ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        return [dict(r) for r in rows]
