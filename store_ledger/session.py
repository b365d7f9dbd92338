"""
Process-level wiring.

open_session() is called once at start-up; the returned LedgerSession is then
handed to whatever needs the catalog or the entries. There are no module-level
singletons, so tests can open as many isolated sessions as they like.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
import logging
from pathlib import Path
import sqlite3
from typing import Callable, List, Optional

from .constants import CATALOG_KEY, ENTRIES_KEY
from .database import get_connection
from .database.gateway import PersistenceGateway
from .database.repositories.catalog_repo import InventoryCatalog
from .database.repositories.entries_repo import LedgerEntry, LedgerEntryStore
from .database.seeders.default_data import seed as seed_default_data
from .modules.ledger.balances import CustomerSummary, filter_by_name_prefix, summarize, total_outstanding
from .modules.ledger.composer import EntryComposer
from .modules.ledger.history import CustomerHistoryService
from .utils.loggers import get_logger, log_event


@dataclass
class LedgerSession:
    conn: sqlite3.Connection
    gateway: PersistenceGateway
    catalog: InventoryCatalog
    entries: LedgerEntryStore
    composer: EntryComposer
    history_service: CustomerHistoryService = field(init=False)

    def __post_init__(self) -> None:
        self.history_service = CustomerHistoryService(self.entries)

    # ---- entry boundary ---------------------------------------------------

    def add_entry(self, kind, customer_name: str, payload) -> LedgerEntry:
        """Compose and append in one step. ValidationError leaves the store untouched."""
        return self.entries.append(self.composer.compose(kind, customer_name, payload))

    def delete_entry(self, entry_id: str) -> bool:
        return self.entries.remove(entry_id)

    # ---- display boundary -------------------------------------------------

    def summaries(self, query: str = "") -> List[CustomerSummary]:
        return filter_by_name_prefix(summarize(self.entries.all()), query)

    def outstanding(self) -> Decimal:
        return total_outstanding(summarize(self.entries.all()))

    def history(self, customer_name: str) -> List[LedgerEntry]:
        return self.history_service.entries(customer_name)

    # ---- lifecycle --------------------------------------------------------

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "LedgerSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_session(
    db_path: str | Path | None = None,
    *,
    seed: bool = True,
    clock: Optional[Callable[[], datetime]] = None,
    logger: Optional[logging.Logger] = None,
) -> LedgerSession:
    """
    Open storage, seed first-run defaults (when `seed`), and load both slots.

    With seed=False, absent slots load as empty collections and nothing is
    written until the first mutation.
    """
    log = logger or get_logger()
    conn = get_connection(db_path)
    try:
        gateway = PersistenceGateway(conn, log)
        if seed:
            seed_default_data(gateway, now=clock() if clock else None)

        catalog = InventoryCatalog.from_records(gateway.load(CATALOG_KEY) or [], gateway, log)
        entries = LedgerEntryStore.from_records(gateway.load(ENTRIES_KEY) or [], gateway, log)
    except Exception:
        conn.close()
        raise

    log_event(log, "session", "open", "Ledger opened",
              {"catalog_items": len(catalog), "entries": len(entries)})
    return LedgerSession(
        conn=conn,
        gateway=gateway,
        catalog=catalog,
        entries=entries,
        composer=EntryComposer(catalog, clock),
    )


__all__ = ["LedgerSession", "open_session"]
