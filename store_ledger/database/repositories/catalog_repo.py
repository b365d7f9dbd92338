# database/repositories/catalog_repo.py
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
import logging
from typing import Iterable, Optional

from ...constants import CATALOG_KEY
from ...errors import NotFoundError, PersistenceError, ValidationError
from ...utils.helpers import QueryView, new_id
from ...utils.loggers import get_logger, log_event
from ...utils.validators import non_empty, try_parse_decimal
from ..gateway import PersistenceGateway


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    price: Decimal

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name, "price": str(self.price)}

    @classmethod
    def from_record(cls, rec: dict) -> "CatalogItem":
        return cls(id=str(rec["id"]), name=str(rec["name"]), price=Decimal(str(rec["price"])))


class InventoryCatalog:
    """
    Goods the shop sells and their current default prices.

    Only used to pre-fill new line items. Sale entries copy name and price at
    the time of sale, so editing or removing an item here never touches
    history (no cascade).

    Every successful mutation writes a full snapshot of the catalog through the
    gateway (when one is attached).
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        items: Iterable[CatalogItem] | None = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.gateway = gateway
        self._log = logger or get_logger()
        # dicts keep insertion order, which is the search order
        self._items: dict[str, CatalogItem] = {}
        for it in items or ():
            if it.id in self._items:
                raise ValidationError(f"Catalog item '{it.id}' appears twice.")
            self._items[it.id] = replace(it, name=self._clean_name(it.name), price=self._clean_price(it.price))

    # ---- Loading / persistence ---------------------------------------------

    @classmethod
    def from_records(
        cls,
        records: Iterable[dict],
        gateway: PersistenceGateway | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> "InventoryCatalog":
        try:
            items = [CatalogItem.from_record(r) for r in records]
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise PersistenceError(f"Stored catalog record is malformed: {exc!r}") from exc
        try:
            return cls(gateway, items, logger)
        except ValidationError as exc:
            raise PersistenceError(f"Stored catalog record is invalid: {exc}") from exc

    def to_records(self) -> list[dict]:
        return [it.to_record() for it in self._items.values()]

    def flush(self) -> None:
        """Write the full catalog snapshot. No-op without a gateway."""
        if self.gateway is not None:
            self.gateway.save(CATALOG_KEY, self.to_records())

    # ---- Internal helpers -------------------------------------------------

    @staticmethod
    def _clean_name(name) -> str:
        if not non_empty(name):
            raise ValidationError("Item name cannot be empty.")
        return str(name).strip()

    @staticmethod
    def _clean_price(price) -> Decimal:
        ok, value = try_parse_decimal(price)
        if not ok:
            raise ValidationError(f"Price '{price}' is not a number.")
        if value <= 0:
            raise ValidationError("Price must be greater than zero.")
        return value

    def _require(self, item_id: str) -> CatalogItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(f"Catalog item '{item_id}' does not exist.")
        return item

    # ---- Queries ----------------------------------------------------------

    def get(self, item_id: str) -> CatalogItem | None:
        """Lookup by id. Returns None for unknown/deleted items."""
        return self._items.get(item_id)

    def list_items(self) -> list[CatalogItem]:
        return list(self._items.values())

    def search(self, query: str = "") -> QueryView:
        """
        Items whose name contains `query`, case-insensitively, in insertion
        order. Empty query matches everything. The result is lazy and can be
        iterated again to see later catalog changes.
        """
        needle = (query or "").casefold()
        return QueryView(lambda: tuple(self._items.values()),
                         lambda it: needle in it.name.casefold())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    # ---- Mutations --------------------------------------------------------

    def add(self, name: str, price) -> CatalogItem:
        item = CatalogItem(id=new_id(), name=self._clean_name(name), price=self._clean_price(price))
        self._items[item.id] = item
        log_event(self._log, "catalog", "add", f"Added catalog item '{item.name}'",
                  {"id": item.id, "price": str(item.price)})
        self.flush()
        return item

    def update(self, item_id: str, *, name: str | None = None, price=None) -> CatalogItem:
        """
        Merge the provided fields into the item and return the updated copy.

        Fields left as None are unchanged. All checks run before anything is
        written, so a rejected update leaves the item as it was.
        """
        item = self._require(item_id)
        new_name = self._clean_name(name) if name is not None else item.name
        new_price = self._clean_price(price) if price is not None else item.price

        item = replace(item, name=new_name, price=new_price)
        self._items[item_id] = item
        log_event(self._log, "catalog", "update", f"Updated catalog item '{item.name}'",
                  {"id": item.id, "price": str(item.price)})
        self.flush()
        return item

    def remove(self, item_id: str) -> None:
        item = self._require(item_id)
        del self._items[item_id]
        log_event(self._log, "catalog", "remove", f"Removed catalog item '{item.name}'", {"id": item_id})
        self.flush()


__all__ = ["CatalogItem", "InventoryCatalog"]
