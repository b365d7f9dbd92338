from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from store_ledger.constants import ENTRIES_KEY
from store_ledger.database.repositories.entries_repo import (
    EntryKind, LedgerEntry, LedgerEntryStore, LineItem,
)
from store_ledger.errors import ValidationError


def test_append_assigns_id_and_returns_stored_entry(store, make_sale):
    stored = store.append(make_sale("Asha", 240))
    assert stored.id
    assert store.get(stored.id) == stored
    assert len(store) == 1


def test_append_keeps_caller_id(store, make_payment):
    stored = store.append(replace(make_payment("Asha", 100), id="pay-1"))
    assert stored.id == "pay-1"
    with pytest.raises(ValidationError, match="already exists"):
        store.append(replace(make_payment("Asha", 5), id="pay-1"))


@pytest.mark.parametrize("mutate", [
    lambda e: replace(e, customer_name=""),
    lambda e: replace(e, customer_name="   "),
    lambda e: replace(e, amount=Decimal("-1")),
    lambda e: replace(e, amount=Decimal("NaN")),
    lambda e: replace(e, line_items=()),
])
def test_append_rejects_malformed_sale(store, gateway, make_sale, mutate):
    with pytest.raises(ValidationError):
        store.append(mutate(make_sale("Asha", 10)))
    assert len(store) == 0
    assert gateway.load(ENTRIES_KEY) is None


def test_payment_cannot_carry_line_items(store, make_payment):
    line = LineItem(id="x", catalog_item_id="", name="Rice", unit_price=Decimal(1), quantity=Decimal(1))
    with pytest.raises(ValidationError):
        store.append(replace(make_payment("Asha", 10), line_items=(line,)))


def test_naive_timestamp_is_stored_as_utc(store):
    entry = LedgerEntry(customer_name="Asha", date=datetime(2026, 1, 2, 8, 30),
                        kind=EntryKind.PAYMENT, amount=Decimal(5))
    stored = store.append(entry)
    assert stored.date == datetime(2026, 1, 2, 8, 30, tzinfo=timezone.utc)


def test_remove_known_and_unknown(store, gateway, make_sale):
    e = store.append(make_sale("Asha", 10))
    assert store.remove(e.id) is True
    assert store.get(e.id) is None
    assert gateway.load(ENTRIES_KEY) == []
    # idempotent
    assert store.remove(e.id) is False
    assert store.remove("never-existed") is False


def test_entries_for_matches_exact_name(store, make_sale, make_payment):
    store.append(make_sale("Ramesh", 10))
    store.append(make_sale("ramesh", 20))
    store.append(make_payment("Ramesh", 5))

    view = store.entries_for("Ramesh")
    assert sorted(e.amount for e in view) == [Decimal(5), Decimal(10)]
    # restartable
    assert len(list(view)) == 2
    store.append(make_payment("Ramesh", 1))
    assert len(list(view)) == 3


def test_snapshot_layout(store, gateway, make_payment, clock):
    line = LineItem(id="li-1", catalog_item_id="cat-1", name="Rice", unit_price=Decimal("120"),
                    quantity=Decimal("2"))
    when = datetime(2026, 2, 1, 10, 0, tzinfo=timezone.utc)
    store.append(LedgerEntry(id="s-1", customer_name="Asha", date=when, kind=EntryKind.SALE,
                             amount=Decimal("240"), line_items=(line,)))
    store.append(replace(make_payment("Asha", "100", when=when, note="cash"), id="p-1"))

    assert gateway.load(ENTRIES_KEY) == [
        {
            "id": "s-1",
            "customerName": "Asha",
            "date": "2026-02-01T10:00:00+00:00",
            "kind": "SALE",
            "amount": "240",
            "lineItems": [{"id": "li-1", "catalogItemId": "cat-1", "name": "Rice",
                           "unitPrice": "120", "quantity": "2"}],
        },
        {
            "id": "p-1",
            "customerName": "Asha",
            "date": "2026-02-01T10:00:00+00:00",
            "kind": "PAYMENT",
            "amount": "100",
            "note": "cash",
        },
    ]


def test_reload_reproduces_entries(store, gateway, make_sale, make_payment):
    store.append(make_sale("Asha", "240"))
    store.append(make_payment("Asha", "100", note="part"))
    store.append(make_sale("Bina", "500.75"))

    reloaded = LedgerEntryStore.from_records(gateway.load(ENTRIES_KEY))
    assert reloaded.all() == store.all()
    assert reloaded.to_records() == store.to_records()
