"""
database/gateway.py

Durable key/value slots for full-collection snapshots.

Two slots are used by the ledger (constants.CATALOG_KEY, constants.ENTRIES_KEY).
Every save replaces the whole value of a slot; there are no deltas and no
transaction spanning both slots, so one slot can be newer than the other after
a crash between two saves.

Values are JSON-encoded. Callers hand over plain dict/list/str structures; the
repositories own the mapping to and from their dataclasses.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Optional

from ..constants import TABLE_KV_STORE
from ..errors import PersistenceError
from ..utils.helpers import to_iso, utc_now
from ..utils.loggers import get_logger, log_event


class PersistenceGateway:
    def __init__(self, conn: sqlite3.Connection, logger: Optional[logging.Logger] = None):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row
        self._log = logger or get_logger()

    # ---------------------------- TX helper ----------------------------

    @contextmanager
    def _immediate_tx(self):
        """
        Start an IMMEDIATE transaction, commit on success, rollback on error.
        """
        cur = self.conn.cursor()
        try:
            cur.execute("BEGIN IMMEDIATE")
            yield cur
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            cur.close()

    # ---------------------------- API ----------------------------

    def load(self, key: str) -> Any | None:
        """Return the last saved value for `key`, or None if the slot is absent."""
        try:
            row = self.conn.execute(
                f"SELECT value FROM {TABLE_KV_STORE} WHERE slot_key=?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            log_event(self._log, "load", "read", f"Could not read slot '{key}'",
                      {"key": key, "error": str(exc)}, level=logging.ERROR)
            raise PersistenceError(f"Could not read '{key}' from storage: {exc}") from exc

        if row is None:
            return None
        try:
            value = json.loads(row["value"])
        except json.JSONDecodeError as exc:
            log_event(self._log, "load", "decode", f"Slot '{key}' holds malformed data",
                      {"key": key, "error": str(exc)}, level=logging.ERROR)
            raise PersistenceError(f"Stored '{key}' record is corrupt: {exc}") from exc

        log_event(self._log, "load", "snapshot", f"Loaded slot '{key}'", {"key": key})
        return value

    def save(self, key: str, value: Any) -> None:
        """
        Durably replace the slot `key` with `value`.

        Visible to the next load() in this or any later process once this returns.
        """
        try:
            payload = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Value for '{key}' is not serializable: {exc}") from exc

        try:
            with self._immediate_tx() as cur:
                cur.execute(
                    f"INSERT INTO {TABLE_KV_STORE}(slot_key, value, updated_at) VALUES (?, ?, ?) "
                    "ON CONFLICT(slot_key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                    (key, payload, to_iso(utc_now())),
                )
        except sqlite3.Error as exc:
            log_event(self._log, "save", "write", f"Could not save slot '{key}'",
                      {"key": key, "error": str(exc)}, level=logging.ERROR)
            raise PersistenceError(f"Could not save '{key}' to storage: {exc}") from exc

        log_event(self._log, "save", "snapshot", f"Saved slot '{key}'",
                  {"key": key, "bytes": len(payload)})

    def delete(self, key: str) -> None:
        """Clear a slot; a later load() returns None."""
        try:
            with self._immediate_tx() as cur:
                cur.execute(f"DELETE FROM {TABLE_KV_STORE} WHERE slot_key=?", (key,))
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not clear '{key}' in storage: {exc}") from exc

    def keys(self) -> list[str]:
        try:
            rows = self.conn.execute(f"SELECT slot_key FROM {TABLE_KV_STORE} ORDER BY slot_key").fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not list storage slots: {exc}") from exc
        return [r["slot_key"] for r in rows]


__all__ = ["PersistenceGateway"]
