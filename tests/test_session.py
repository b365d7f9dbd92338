from decimal import Decimal

import pytest

from store_ledger import ValidationError, open_session
from store_ledger.constants import CATALOG_KEY, ENTRIES_KEY
from store_ledger.database.repositories.entries_repo import EntryKind
from store_ledger.database.seeders.default_data import SAMPLE_CUSTOMER, STARTER_GOODS
from store_ledger.modules.ledger.composer import LineItemDraft


def test_first_run_seeds_starter_catalog_and_sample_customer(db_path, clock):
    with open_session(db_path, clock=clock) as s:
        assert [(i.name, i.price) for i in s.catalog.list_items()] == [
            (n, Decimal(p)) for n, p in STARTER_GOODS
        ]
        rows = s.summaries()
        assert [(r.customer_name, r.total_owed) for r in rows] == [(SAMPLE_CUSTOMER, Decimal(140))]


def test_seeding_only_happens_once(db_path, clock):
    with open_session(db_path, clock=clock) as s:
        s.catalog.add("Soap", 30)
        for e in s.entries.all():
            s.delete_entry(e.id)

    with open_session(db_path, clock=clock) as s:
        assert len(s.catalog) == len(STARTER_GOODS) + 1
        assert s.entries.all() == []


def test_without_seed_nothing_is_written(db_path):
    with open_session(db_path, seed=False) as s:
        assert len(s.catalog) == 0
        assert len(s.entries) == 0
        assert s.gateway.load(CATALOG_KEY) is None
        assert s.gateway.load(ENTRIES_KEY) is None


def test_add_entry_and_reopen(db_path, clock):
    with open_session(db_path, seed=False, clock=clock) as s:
        rice = s.catalog.add("Rice", 120)
        sale = s.add_entry("SALE", "Asha", [s.composer.draft_from_catalog(rice.id, 2)])
        s.add_entry("PAYMENT", "Asha", {"amount": "100"})
        s.add_entry(EntryKind.SALE, "Bina", [LineItemDraft(name="Oil", unit_price=500, quantity=1)])
        before = s.entries.to_records()

    with open_session(db_path, seed=False) as s:
        assert s.entries.to_records() == before
        assert [(r.customer_name, r.total_owed) for r in s.summaries()] == [
            ("Bina", Decimal(500)), ("Asha", Decimal(140)),
        ]
        assert s.outstanding() == Decimal(640)
        assert s.entries.get(sale.id).amount == Decimal(240)


def test_rejected_entry_is_not_appended(db_path):
    with open_session(db_path, seed=False) as s:
        with pytest.raises(ValidationError):
            s.add_entry("SALE", "Asha", [LineItemDraft(name="", unit_price=10, quantity=1)])
        with pytest.raises(ValidationError):
            s.add_entry("PAYMENT", "", {"amount": "10"})
        assert len(s.entries) == 0
        assert s.gateway.load(ENTRIES_KEY) is None


def test_catalog_edits_do_not_touch_history(db_path, clock):
    with open_session(db_path, seed=False, clock=clock) as s:
        rice = s.catalog.add("Rice", 120)
        sale = s.add_entry("SALE", "Asha", [s.composer.draft_from_catalog(rice.id, 2)])

        s.catalog.update(rice.id, name="Premium Rice", price=150)
        s.catalog.remove(rice.id)

        stored = s.entries.get(sale.id)
        assert stored.amount == Decimal(240)
        assert stored.line_items[0].unit_price == Decimal(120)
        assert stored.line_items[0].name == "Rice"
        # weak reference: lookup fails, line item keeps its own copy
        assert s.catalog.get(stored.line_items[0].catalog_item_id) is None


def test_history_newest_first_and_filtering(db_path, clock):
    with open_session(db_path, seed=False, clock=clock) as s:
        first = s.add_entry("SALE", "Asha", [{"name": "Rice", "price": 120, "quantity": 1}])
        second = s.add_entry("PAYMENT", "Asha", "20")
        s.add_entry("SALE", "Rashid", [{"name": "Tea", "price": 90, "quantity": 1}])

        assert [e.id for e in s.history("Asha")] == [second.id, first.id]
        assert [r.customer_name for r in s.summaries("SH")] == ["Asha", "Rashid"]
        assert s.history_service.totals("Asha") == {
            "sales": Decimal(120), "payments": Decimal(20), "balance": Decimal(100), "count": 2,
        }
        assert s.history_service.balance("Asha") == Decimal(100)
        assert s.history_service.known_customers("") == ["Asha", "Rashid"]
        assert s.history_service.known_customers("RA") == ["Rashid"]


def test_close_is_idempotent(db_path):
    s = open_session(db_path, seed=False)
    s.close()
    s.close()
    assert s.conn is None
