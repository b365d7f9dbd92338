"""
modules/ledger/balances.py

Pure helpers that derive customer balances from ledger entries.

Nothing here is cached or stored: every call recomputes from the full entry
list it is given, so a summary can never drift from the entries behind it.
Do not open connections or touch the gateway here.

Sign convention:
  - SALE adds its amount to what the customer owes.
  - PAYMENT subtracts its amount.
  - A negative total means the customer paid in advance.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ...database.repositories.entries_repo import LedgerEntry
from ...utils.helpers import exact_arithmetic, exact_sum

__all__ = [
    "CustomerSummary",
    "summarize",
    "filter_by_name_prefix",
    "total_outstanding",
    "balance_of",
]


@dataclass(frozen=True)
class CustomerSummary:
    customer_name: str
    total_owed: Decimal
    last_entry_date: datetime

    @property
    def is_advance(self) -> bool:
        return self.total_owed < 0


def summarize(entries: Iterable[LedgerEntry]) -> list[CustomerSummary]:
    """
    One summary per distinct customer name, biggest debt first.

    Customers are grouped by exact, case-sensitive name ("Ramesh" and
    "ramesh" are two customers). Ties keep the order in which the customers
    first appear in `entries`.
    """
    totals: dict[str, Decimal] = {}
    last_seen: dict[str, datetime] = {}

    for e in entries:
        name = e.customer_name
        with exact_arithmetic():
            totals[name] = totals.get(name, Decimal(0)) + e.signed_amount
        prev = last_seen.get(name)
        if prev is None or e.date > prev:
            last_seen[name] = e.date

    rows = [CustomerSummary(n, totals[n], last_seen[n]) for n in totals]
    rows.sort(key=lambda s: s.total_owed, reverse=True)
    return rows


def filter_by_name_prefix(summaries: Iterable[CustomerSummary], query: str) -> list[CustomerSummary]:
    """Keep summaries whose name contains `query` (case-insensitive). Order is kept."""
    needle = (query or "").casefold()
    return [s for s in summaries if needle in s.customer_name.casefold()]


def total_outstanding(summaries: Iterable[CustomerSummary]) -> Decimal:
    """Net amount owed to the shop across all customers (advances count negative)."""
    return exact_sum(s.total_owed for s in summaries)


def balance_of(entries: Iterable[LedgerEntry], customer_name: str) -> Decimal:
    """Current balance for one customer (exact name match)."""
    return exact_sum(e.signed_amount for e in entries if e.customer_name == customer_name)
