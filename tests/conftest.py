# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own SQLite file under tmp_path (no shared DB)
# - Stores are wired to a real PersistenceGateway so snapshot writes run
# - A stepping clock keeps entry timestamps deterministic and increasing
# - Qt runs offscreen (table model tests only need QtCore)
# ---------------------------------------------------------------------

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from store_ledger.database import get_connection
from store_ledger.database.gateway import PersistenceGateway
from store_ledger.database.repositories.catalog_repo import InventoryCatalog
from store_ledger.database.repositories.entries_repo import (
    EntryKind, LedgerEntry, LedgerEntryStore, LineItem,
)
from store_ledger.modules.ledger.composer import EntryComposer


class StepClock:
    """Returns start + n*step on the n-th call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now


# ---------- Storage ----------
@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "ledger.db"


@pytest.fixture()
def conn(db_path):
    con = get_connection(db_path)
    try:
        yield con
    finally:
        con.close()


@pytest.fixture()
def gateway(conn):
    return PersistenceGateway(conn)


# ---------- Stores ----------
@pytest.fixture()
def clock():
    return StepClock(datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def catalog(gateway):
    return InventoryCatalog(gateway)


@pytest.fixture()
def store(gateway):
    return LedgerEntryStore(gateway)


@pytest.fixture()
def composer(catalog, clock):
    return EntryComposer(catalog, clock)


# ---------- Handy builders ----------
@pytest.fixture()
def make_sale(clock):
    def _make(customer: str, amount, *, when: datetime | None = None) -> LedgerEntry:
        value = Decimal(str(amount))
        line = LineItem(id="", catalog_item_id="", name="Goods", unit_price=value, quantity=Decimal(1))
        return LedgerEntry(customer_name=customer, date=when or clock(), kind=EntryKind.SALE,
                           amount=value, line_items=(line,))
    return _make


@pytest.fixture()
def make_payment(clock):
    def _make(customer: str, amount, *, when: datetime | None = None, note: str | None = None) -> LedgerEntry:
        return LedgerEntry(customer_name=customer, date=when or clock(), kind=EntryKind.PAYMENT,
                           amount=Decimal(str(amount)), note=note)
    return _make
