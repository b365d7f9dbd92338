from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from ...database.repositories.entries_repo import EntryKind, LedgerEntry, LedgerEntryStore
from ...utils.helpers import exact_arithmetic
from .balances import balance_of, filter_by_name_prefix, summarize


class CustomerHistoryService:
    """
    Presenter/service for one customer's account page and for name suggestions.

    Reads the entry store on every call and keeps no state of its own.
    """

    def __init__(self, store: LedgerEntryStore):
        self.store = store

    def entries(self, customer_name: str) -> List[LedgerEntry]:
        """Entries for the customer, newest first."""
        return sorted(self.store.entries_for(customer_name), key=lambda e: e.date, reverse=True)

    def balance(self, customer_name: str) -> Decimal:
        return balance_of(self.store.all(), customer_name)

    def totals(self, customer_name: str) -> Dict[str, Any]:
        """
        Returns {"sales", "payments", "balance", "count"} for the customer.

        balance = sales - payments (negative means advance).
        """
        sales = Decimal(0)
        payments = Decimal(0)
        count = 0
        with exact_arithmetic():
            for e in self.store.entries_for(customer_name):
                count += 1
                if e.kind is EntryKind.SALE:
                    sales += e.amount
                else:
                    payments += e.amount
            balance = sales - payments
        return {"sales": sales, "payments": payments, "balance": balance, "count": count}

    def known_customers(self, query: str = "") -> List[str]:
        """Distinct customer names matching `query`, biggest balance first."""
        rows = filter_by_name_prefix(summarize(self.store.all()), query)
        return [s.customer_name for s in rows]


__all__ = ["CustomerHistoryService"]
