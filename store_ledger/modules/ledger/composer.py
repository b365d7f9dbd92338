"""
modules/ledger/composer.py

Turns what the shopkeeper typed into a LedgerEntry ready for the store.

Nothing here mutates a store: a rejected draft raises ValidationError and the
caller keeps its form open. The composed entry has no id yet; the store
assigns one on append().
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from ...database.repositories.catalog_repo import InventoryCatalog
from ...database.repositories.entries_repo import EntryKind, LedgerEntry, LineItem
from ...errors import NotFoundError, ValidationError
from ...utils.helpers import exact_sum, new_id, utc_now
from ...utils.validators import non_empty, try_parse_decimal


@dataclass
class LineItemDraft:
    """An editable sale row. Values are raw input (str/int/Decimal)."""
    name: str = ""
    unit_price: Any = 0
    quantity: Any = 1
    catalog_item_id: str = ""

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "LineItemDraft":
        """Accepts snake_case keys or the camelCase keys of the stored record."""
        def pick(*keys, default=None):
            for k in keys:
                if k in row and row[k] is not None:
                    return row[k]
            return default

        return cls(
            name=pick("name", default=""),
            unit_price=pick("unit_price", "unitPrice", "price", default=0),
            quantity=pick("quantity", "qty", default=1),
            catalog_item_id=pick("catalog_item_id", "catalogItemId", "itemId", default=""),
        )


def _coerce_kind(kind) -> EntryKind:
    if isinstance(kind, EntryKind):
        return kind
    try:
        return EntryKind(str(kind).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown entry kind: {kind!r}.") from None


class EntryComposer:
    def __init__(
        self,
        catalog: InventoryCatalog | None = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog
        self._clock = clock or utc_now

    # ---- helpers ------------------------------------------------------------

    @staticmethod
    def _customer(customer_name) -> str:
        if not non_empty(customer_name):
            raise ValidationError("Customer name cannot be empty.")
        return str(customer_name).strip()

    @staticmethod
    def _line_item(draft: LineItemDraft) -> LineItem:
        name = str(draft.name).strip()
        ok, price = try_parse_decimal(draft.unit_price)
        if not ok or price < 0:
            raise ValidationError(f"Price for '{name}' must be a number of zero or more.")
        ok, qty = try_parse_decimal(draft.quantity)
        if not ok or qty <= 0:
            raise ValidationError(f"Quantity for '{name}' must be greater than zero.")
        return LineItem(
            id=new_id(),
            catalog_item_id=str(draft.catalog_item_id or ""),
            name=name,
            unit_price=price,
            quantity=qty,
        )

    # ---- API ------------------------------------------------------------------

    def compose(self, kind, customer_name: str, payload) -> LedgerEntry:
        """
        Entry point for the entry-creation boundary.

        SALE: `payload` is an iterable of LineItemDraft or mappings.
        PAYMENT: `payload` is a mapping with "amount" and optional "note", or
        the raw amount itself.
        """
        k = _coerce_kind(kind)
        if k is EntryKind.SALE:
            return self.compose_sale(customer_name, payload or ())
        if isinstance(payload, Mapping):
            return self.compose_payment(customer_name, payload.get("amount"), payload.get("note"))
        return self.compose_payment(customer_name, payload)

    def compose_sale(self, customer_name: str, items: Iterable[LineItemDraft | Mapping]) -> LedgerEntry:
        """
        Rows with an empty name are dropped silently; at least one must remain.
        amount is the exact sum of unit_price * quantity, with no rounding.
        """
        customer = self._customer(customer_name)

        drafts = [it if isinstance(it, LineItemDraft) else LineItemDraft.from_mapping(it) for it in items]
        kept = [self._line_item(d) for d in drafts if non_empty(d.name)]
        if not kept:
            raise ValidationError("Add at least one item with a name.")

        amount = exact_sum(li.line_total for li in kept)
        return LedgerEntry(
            customer_name=customer,
            date=self._clock(),
            kind=EntryKind.SALE,
            amount=amount,
            line_items=tuple(kept),
        )

    def compose_payment(self, customer_name: str, amount, note: str | None = None) -> LedgerEntry:
        customer = self._customer(customer_name)
        ok, value = try_parse_decimal(amount)
        if not ok:
            raise ValidationError("Enter the payment amount.")
        if value < 0:
            raise ValidationError("Payment amount cannot be negative.")

        note_text = str(note).strip() if note is not None else ""
        return LedgerEntry(
            customer_name=customer,
            date=self._clock(),
            kind=EntryKind.PAYMENT,
            amount=value,
            note=note_text or None,
        )

    def draft_from_catalog(self, item_id: str, quantity=1) -> LineItemDraft:
        """Pre-fill a sale row from the catalog's current name and price."""
        item = self.catalog.get(item_id) if self.catalog is not None else None
        if item is None:
            raise NotFoundError(f"Catalog item '{item_id}' does not exist.")
        return LineItemDraft(name=item.name, unit_price=item.price, quantity=quantity,
                             catalog_item_id=item.id)


__all__ = ["EntryComposer", "LineItemDraft"]
