"""
Ledger module: balances, entry composition and customer history.

The Qt table model lives in .model and is imported explicitly by the UI.
"""
from .balances import CustomerSummary, balance_of, filter_by_name_prefix, summarize, total_outstanding
from .composer import EntryComposer, LineItemDraft
from .history import CustomerHistoryService

__all__ = [
    "CustomerSummary",
    "balance_of",
    "filter_by_name_prefix",
    "summarize",
    "total_outstanding",
    "EntryComposer",
    "LineItemDraft",
    "CustomerHistoryService",
]
