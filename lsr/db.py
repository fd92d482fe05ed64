from __future__ import annotations

import os
import sqlite3
import sys
from datetime import datetime, timezone
from typing import Any

from .settings import settings

_db_path: str | None = None


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _resolve_db_path() -> str:
    """Return a file path usable by sqlite.

    When the sidecar runs in a container with a bind-mounted *file* path that
    does not exist yet, Docker creates a *directory* there instead. If the
    configured path is a directory, the DB file is placed inside it.
    """
    p = os.path.abspath(_db_path or settings.db_path)

    if os.path.isdir(p):
        p = os.path.join(p, "lsr.db")

    parent = os.path.dirname(p)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)

    return p


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(_resolve_db_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(path: str | None = None) -> None:
    """Create the event table if it does not exist.

    ``path`` overrides ``settings.db_path`` for the rest of the process.
    """
    global _db_path
    if path is not None:
        _db_path = path
    with connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS events (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              ts TEXT NOT NULL,
              level TEXT NOT NULL,
              service_name TEXT,
              address TEXT,
              message TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_events_ts ON events(ts);
            """
        )


def log_event(level: str, message: str, service_name: str | None = None, address: str | None = None) -> bool:
    """Append an event, keeping at most ``settings.events_max`` rows.

    Returns False when the journal cannot be written (locked, read-only, disk
    full). Discovery and serving must keep going in that case, so the error is
    only echoed to stderr.
    """
    try:
        with connect() as conn:
            cur = conn.execute(
                "INSERT INTO events (ts, level, service_name, address, message) VALUES (?, ?, ?, ?, ?)",
                (utc_now(), level.upper(), service_name, address, message),
            )
            if settings.events_max > 0:
                conn.execute("DELETE FROM events WHERE id <= ?", (cur.lastrowid - settings.events_max,))
        return True
    except (sqlite3.Error, OSError) as e:
        print(f"lsr: could not write event ({type(e).__name__}: {e}): {level.upper()} {message}", file=sys.stderr)
        return False


def latest_events(limit: int = 100) -> list[dict[str, Any]]:
    with connect() as conn:
        rows = conn.execute("SELECT * FROM events ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        return [dict(r) for r in rows]
