from __future__ import annotations

import json
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Iterator


MEMORY = ":memory:"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _resolve_db_path(path: str) -> str:
    """Return a file path usable by sqlite.

    If the configured path is a directory (e.g. a bind mount Docker created
    for a missing file), the DB file is placed inside it.
    """
    p = os.path.abspath(path)
    if os.path.isdir(p):
        p = os.path.join(p, "lrpbridge.db")

    parent = os.path.dirname(p)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)
    return p


_SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  level TEXT NOT NULL,
  operation TEXT NOT NULL,
  process_guid TEXT,
  message TEXT NOT NULL,
  data TEXT
);

CREATE INDEX IF NOT EXISTS idx_events_ts ON events(ts);
CREATE INDEX IF NOT EXISTS idx_events_process_guid ON events(process_guid);
"""


class EventLog:
    """Structured event log handed to each component at construction.

    Every failure path writes one row (operation, identity, error) before the
    error is returned to the caller. Nothing reads the log for control flow.
    """

    def __init__(self, path: str = MEMORY):
        self.path = path if path == MEMORY else _resolve_db_path(path)
        self._lock = Lock()
        # An in-memory database only lives as long as its connection.
        self._shared: sqlite3.Connection | None = None
        if self.path == MEMORY:
            self._shared = self._open()
        with self._connect() as conn:
            conn.executescript(_SCHEMA)

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            conn = self._shared or self._open()
            try:
                with conn:
                    yield conn
            finally:
                if conn is not self._shared:
                    conn.close()

    def log(
        self,
        level: str,
        operation: str,
        message: str,
        process_guid: str | None = None,
        **data: Any,
    ) -> None:
        payload = json.dumps(data, default=str, sort_keys=True) if data else None
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO events (ts, level, operation, process_guid, message, data) VALUES (?, ?, ?, ?, ?, ?)",
                (utc_now(), level.upper(), operation, process_guid, message, payload),
            )

    def info(self, operation: str, message: str, process_guid: str | None = None, **data: Any) -> None:
        self.log("INFO", operation, message, process_guid, **data)

    def error(
        self,
        operation: str,
        err: BaseException,
        process_guid: str | None = None,
        **data: Any,
    ) -> None:
        self.log("ERROR", operation, f"{type(err).__name__}: {err}", process_guid, **data)

    def latest(self, limit: int = 100, process_guid: str | None = None) -> list[dict[str, Any]]:
        with self._connect() as conn:
            if process_guid:
                rows = conn.execute(
                    "SELECT * FROM events WHERE process_guid=? ORDER BY id DESC LIMIT ?",
                    (process_guid, limit),
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM events ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        out: list[dict[str, Any]] = []
        for r in rows:
            row = dict(r)
            row["data"] = json.loads(row["data"]) if row["data"] else {}
            out.append(row)
        return out

    def close(self) -> None:
        if self._shared is not None:
            self._shared.close()
            self._shared = None
