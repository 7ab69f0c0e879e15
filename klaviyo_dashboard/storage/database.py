"""
SQLite access layer.

Holds the schema for the ``clients`` and ``admins`` tables and a small
query wrapper used by the repositories:

    rows = query("SELECT id, email FROM clients WHERE email = ?", (email,))
    result = run("DELETE FROM clients WHERE id = ?", (client_id,))
    print(result.changes)

The database location comes from ``DATABASE_PATH`` unless a path is passed
explicitly.
"""

import sqlite3
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from klaviyo_dashboard.core import get_config, get_logger

logger = get_logger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS clients (
        id                  INTEGER PRIMARY KEY AUTOINCREMENT,
        name                TEXT NOT NULL,
        email               TEXT UNIQUE NOT NULL,
        password            TEXT NOT NULL,
        klaviyo_private_key TEXT NOT NULL,
        created_at          DATETIME DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS admins (
        id         INTEGER PRIMARY KEY AUTOINCREMENT,
        email      TEXT UNIQUE NOT NULL,
        password   TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
"""


@dataclass
class RunResult:
    """Outcome of a write statement."""

    id: int | None
    changes: int


def resolve_path(db_path: Path | str | None = None) -> Path:
    """Return the explicit path, or the configured DATABASE_PATH."""
    if db_path is not None:
        return Path(db_path)
    return get_config().get_database_config().path


@contextmanager
def get_connection(db_path: Path | str | None = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Open a connection that commits on success and rolls back on error.

    Rows are returned as ``sqlite3.Row`` so they can be turned into dicts.
    """
    path = resolve_path(db_path)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(db_path: Path | str | None = None) -> Path:
    """Create all tables (idempotent). Returns the database path."""
    path = resolve_path(db_path)
    with get_connection(path) as conn:
        conn.executescript(SCHEMA)

    logger.info("Database initialized", extra={"database": str(path)})
    return path


def query(sql: str, params: Sequence[Any] = (), db_path: Path | str | None = None) -> list[dict[str, Any]]:
    """Run a SELECT and return every row as a dict."""
    with get_connection(db_path) as conn:
        rows = conn.execute(sql, tuple(params)).fetchall()
    return [dict(row) for row in rows]


def run(sql: str, params: Sequence[Any] = (), db_path: Path | str | None = None) -> RunResult:
    """Run an INSERT/UPDATE/DELETE and return the last row id and change count."""
    with get_connection(db_path) as conn:
        cursor = conn.execute(sql, tuple(params))
        return RunResult(id=cursor.lastrowid, changes=cursor.rowcount)
