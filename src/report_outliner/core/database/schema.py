"""SQLite schema creation and migration for the project store."""

import sqlite3

from loguru import logger

SCHEMA_VERSION = 2

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_projects_updated ON projects(updated_at DESC);
CREATE INDEX IF NOT EXISTS idx_projects_title ON projects(title COLLATE NOCASE);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

# SQL that upgrades a database from version N-1 to N, keyed by N.
_MIGRATIONS: dict[int, str] = {
    2: "CREATE INDEX IF NOT EXISTS idx_projects_title ON projects(title COLLATE NOCASE);",
}


def _set_version(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO metadata (key, value) VALUES ('schema_version', ?)",
        (str(version),),
    )


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes at the current version."""
    conn.executescript(_SCHEMA_SQL)
    _set_version(conn, SCHEMA_VERSION)
    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Return the stored schema version, or None for a database without one."""
    has_metadata = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'metadata'"
    ).fetchone()
    if has_metadata is None:
        return None
    row = conn.execute("SELECT value FROM metadata WHERE key = 'schema_version'").fetchone()
    return int(row[0]) if row else None


def migrate_schema(conn: sqlite3.Connection) -> None:
    """Bring the database up to ``SCHEMA_VERSION``, creating it if needed.

    Raises:
        RuntimeError: If the database was written by a newer release.
    """
    version = get_schema_version(conn)
    if version is None:
        create_schema(conn)
        return
    if version > SCHEMA_VERSION:
        msg = f"Database schema version {version} is newer than supported ({SCHEMA_VERSION})"
        raise RuntimeError(msg)

    for target in range(version + 1, SCHEMA_VERSION + 1):
        logger.info("Migrating project database to schema version {}", target)
        conn.executescript(_MIGRATIONS[target])
        _set_version(conn, target)
        conn.commit()
