# ABOUTME: Opens the shelfmatch library database and keeps its schema current.
# ABOUTME: Creates the v1 tables on first use, runs pending migrations, and scopes connections.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from shelfmatch.db.schema import MIGRATIONS, SCHEMA_V1

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".shelfmatch" / "library.db"

# Milliseconds to wait on a locked database before raising.
BUSY_TIMEOUT_MS = 5000


def _schema_exists(conn: sqlite3.Connection) -> bool:
    cursor = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    )
    return cursor.fetchone() is not None


def _get_schema_version(conn: sqlite3.Connection) -> int:
    """Highest recorded schema version, or 0 for an empty version table."""
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def _apply_migrations(conn: sqlite3.Connection) -> list[int]:
    """Run every migration newer than the stored version.

    Returns:
        The versions that were applied, oldest first.
    """
    current = _get_schema_version(conn)
    applied: list[int] = []
    for version, script in MIGRATIONS:
        if version <= current:
            continue
        logger.info("Migrating library schema from v%d to v%d", current, version)
        conn.executescript(script)
        current = version
        applied.append(version)
    return applied


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the shelfmatch library database.

    Missing parent directories are created. The connection uses WAL
    journaling, enforces foreign keys, and returns sqlite3.Row rows.

    Args:
        path: Database file. Defaults to ~/.shelfmatch/library.db.

    Returns:
        A connection whose schema is at the latest version.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")

    if not _schema_exists(conn):
        logger.info("Creating library database at %s", db_path)
        conn.executescript(SCHEMA_V1)
    _apply_migrations(conn)

    return conn


@contextmanager
def library_session(path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """``open_library`` for a ``with`` block; the connection is closed on exit."""
    conn = open_library(path)
    try:
        yield conn
    finally:
        conn.close()
