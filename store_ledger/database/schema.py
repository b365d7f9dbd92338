import sqlite3

from ..constants import TABLE_KV_STORE, TABLE_SCHEMA_VERSION

SQL = rf"""
/* -------- schema version (single row) -------- */
CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION} (
    id      INTEGER PRIMARY KEY CHECK (id = 1),
    version TEXT NOT NULL
);

/* -------- keyed snapshot slots (catalog, entries) -------- */
CREATE TABLE IF NOT EXISTS {TABLE_KV_STORE} (
    slot_key   TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Apply the schema. Idempotent (CREATE ... IF NOT EXISTS only)."""
    conn.executescript(SQL)
