from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
import logging
from typing import Iterable, Optional

from ...constants import ENTRIES_KEY
from ...errors import PersistenceError, ValidationError
from ...utils.helpers import QueryView, exact_arithmetic, from_iso, new_id, to_iso
from ...utils.loggers import get_logger, log_event
from ...utils.validators import non_empty
from ..gateway import PersistenceGateway


class EntryKind(str, Enum):
    SALE = "SALE"          # goods given on credit; raises the balance
    PAYMENT = "PAYMENT"    # cash received; lowers the balance


@dataclass(frozen=True)
class LineItem:
    """
    One good within a sale: a snapshot of name and price at the time of sale.

    `catalog_item_id` is a lookup aid only ("" for goods typed by hand). The
    catalog item it names may be edited or deleted later without affecting
    this row.
    """
    id: str
    catalog_item_id: str
    name: str
    unit_price: Decimal
    quantity: Decimal

    @property
    def line_total(self) -> Decimal:
        with exact_arithmetic():
            return self.unit_price * self.quantity

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "catalogItemId": self.catalog_item_id,
            "name": self.name,
            "unitPrice": str(self.unit_price),
            "quantity": str(self.quantity),
        }

    @classmethod
    def from_record(cls, rec: dict) -> "LineItem":
        return cls(
            id=str(rec["id"]),
            catalog_item_id=str(rec.get("catalogItemId") or ""),
            name=str(rec["name"]),
            unit_price=Decimal(str(rec["unitPrice"])),
            quantity=Decimal(str(rec["quantity"])),
        )


@dataclass(frozen=True)
class LedgerEntry:
    """
    A dated financial event for one customer.

    SALE entries carry line items and `amount` is their exact total.
    PAYMENT entries carry no line items and an optional note.
    Entries are never edited; a mistake is corrected by deleting and re-adding.
    """
    customer_name: str
    date: datetime
    kind: EntryKind
    amount: Decimal
    line_items: tuple[LineItem, ...] = ()
    note: str | None = None
    id: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        """Effect on the customer's balance: +amount for SALE, -amount for PAYMENT."""
        if self.kind is EntryKind.SALE:
            return self.amount
        with exact_arithmetic():
            return -self.amount

    def to_record(self) -> dict:
        rec = {
            "id": self.id,
            "customerName": self.customer_name,
            "date": to_iso(self.date),
            "kind": self.kind.value,
            "amount": str(self.amount),
        }
        if self.kind is EntryKind.SALE:
            rec["lineItems"] = [li.to_record() for li in self.line_items]
        if self.note is not None:
            rec["note"] = self.note
        return rec

    @classmethod
    def from_record(cls, rec: dict) -> "LedgerEntry":
        return cls(
            id=str(rec["id"]),
            customer_name=str(rec["customerName"]),
            date=from_iso(str(rec["date"])),
            kind=EntryKind(rec["kind"]),
            amount=Decimal(str(rec["amount"])),
            line_items=tuple(LineItem.from_record(r) for r in rec.get("lineItems") or ()),
            note=rec.get("note"),
        )


class LedgerEntryStore:
    """
    Canonical list of ledger entries.

    Key behavior:
      - append() checks only the shape every stored entry must have (customer
        name, non-negative amount, line items iff SALE). Totals are the
        composer's job.
      - remove() of an unknown id is a no-op.
      - Every change writes a full snapshot of all entries through the gateway.
    """

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        entries: Iterable[LedgerEntry] | None = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.gateway = gateway
        self._log = logger or get_logger()
        self._entries: dict[str, LedgerEntry] = {}
        for e in entries or ():
            self._admit(e)

    # ---- Loading / persistence ---------------------------------------------

    @classmethod
    def from_records(
        cls,
        records: Iterable[dict],
        gateway: PersistenceGateway | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> "LedgerEntryStore":
        try:
            entries = [LedgerEntry.from_record(r) for r in records]
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise PersistenceError(f"Stored entries record is malformed: {exc!r}") from exc
        try:
            return cls(gateway, entries, logger)
        except ValidationError as exc:
            raise PersistenceError(f"Stored entries record is invalid: {exc}") from exc

    def to_records(self) -> list[dict]:
        return [e.to_record() for e in self._entries.values()]

    def flush(self) -> None:
        """Write the full entries snapshot. No-op without a gateway."""
        if self.gateway is not None:
            self.gateway.save(ENTRIES_KEY, self.to_records())

    # ---- Internal helpers -------------------------------------------------

    def _check_shape(self, entry: LedgerEntry) -> None:
        if not non_empty(entry.customer_name):
            raise ValidationError("Customer name cannot be empty.")
        if not isinstance(entry.date, datetime):
            raise ValidationError("Entry date must be a timestamp.")
        if not isinstance(entry.kind, EntryKind):
            raise ValidationError(f"Unknown entry kind: {entry.kind!r}.")
        if not isinstance(entry.amount, Decimal) or not entry.amount.is_finite():
            raise ValidationError("Amount must be a finite decimal.")
        if entry.amount < 0:
            raise ValidationError("Amount cannot be negative.")
        if entry.kind is EntryKind.SALE and not entry.line_items:
            raise ValidationError("A sale needs at least one line item.")
        if entry.kind is EntryKind.PAYMENT and entry.line_items:
            raise ValidationError("A payment cannot carry line items.")
        if entry.id and entry.id in self._entries:
            raise ValidationError(f"Entry '{entry.id}' already exists.")

    def _admit(self, entry: LedgerEntry) -> LedgerEntry:
        self._check_shape(entry)
        stored = replace(entry, id=entry.id or new_id())
        if stored.date.tzinfo is None:
            stored = replace(stored, date=stored.date.replace(tzinfo=timezone.utc))
        self._entries[stored.id] = stored
        return stored

    # ---- Queries ----------------------------------------------------------

    def get(self, entry_id: str) -> LedgerEntry | None:
        return self._entries.get(entry_id)

    def all(self) -> list[LedgerEntry]:
        return list(self._entries.values())

    def entries_for(self, customer_name: str) -> QueryView:
        """Entries whose customer name matches exactly (case-sensitive). Unordered."""
        return QueryView(lambda: tuple(self._entries.values()),
                         lambda e: e.customer_name == customer_name)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    # ---- Mutations --------------------------------------------------------

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Store `entry`, assigning a fresh id when it has none. Returns the stored entry."""
        stored = self._admit(entry)
        log_event(self._log, "entries", "append",
                  f"Recorded {stored.kind.value} for '{stored.customer_name}'",
                  {"id": stored.id, "amount": str(stored.amount)})
        self.flush()
        return stored

    def remove(self, entry_id: str) -> bool:
        """
        Delete unconditionally (confirmation belongs to the caller).

        Returns True if an entry was removed; unknown ids are a silent no-op
        and do not rewrite the snapshot.
        """
        entry = self._entries.pop(entry_id, None)
        if entry is None:
            return False
        log_event(self._log, "entries", "remove",
                  f"Deleted {entry.kind.value} for '{entry.customer_name}'", {"id": entry_id})
        self.flush()
        return True


__all__ = ["EntryKind", "LineItem", "LedgerEntry", "LedgerEntryStore"]
