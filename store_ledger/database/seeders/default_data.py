from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ...constants import CATALOG_KEY, ENTRIES_KEY
from ...utils.helpers import new_id, utc_now
from ..gateway import PersistenceGateway
from ..repositories.catalog_repo import CatalogItem, InventoryCatalog
from ..repositories.entries_repo import EntryKind, LedgerEntry, LineItem

STARTER_GOODS = [
    ("Basmati Rice 1kg", "120"),
    ("Cooking Oil 1L", "180"),
    ("Sugar 1kg", "45"),
    ("Wheat Flour 5kg", "250"),
    ("Tea Leaves 250g", "90"),
]

SAMPLE_CUSTOMER = "Ramesh Kumar"


def starter_catalog() -> list[CatalogItem]:
    return [CatalogItem(id=new_id(), name=n, price=Decimal(p)) for n, p in STARTER_GOODS]


def sample_entries(catalog: list[CatalogItem], now: datetime | None = None) -> list[LedgerEntry]:
    """
    One customer with a 2 x rice sale and a part payment, so a fresh install
    shows how a balance builds up. Empty if rice is not in `catalog`.
    """
    rice = next((it for it in catalog if it.name == STARTER_GOODS[0][0]), None)
    if rice is None:
        return []
    ts = now or utc_now()
    line = LineItem(id=new_id(), catalog_item_id=rice.id, name=rice.name,
                    unit_price=rice.price, quantity=Decimal(2))
    return [
        LedgerEntry(id=new_id(), customer_name=SAMPLE_CUSTOMER, date=ts, kind=EntryKind.SALE,
                    amount=line.line_total, line_items=(line,)),
        LedgerEntry(id=new_id(), customer_name=SAMPLE_CUSTOMER, date=ts, kind=EntryKind.PAYMENT,
                    amount=Decimal(100), note="Partial payment in cash"),
    ]


def seed(gateway: PersistenceGateway, now: datetime | None = None) -> None:
    # only fills slots that were never written; safe to run on every start
    catalog_rec = gateway.load(CATALOG_KEY)
    if catalog_rec is None:
        items = starter_catalog()
        gateway.save(CATALOG_KEY, [it.to_record() for it in items])
    else:
        items = InventoryCatalog.from_records(catalog_rec).list_items()

    if gateway.load(ENTRIES_KEY) is None:
        gateway.save(ENTRIES_KEY, [e.to_record() for e in sample_entries(items, now)])
