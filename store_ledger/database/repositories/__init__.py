from .catalog_repo import CatalogItem, InventoryCatalog
from .entries_repo import EntryKind, LedgerEntry, LedgerEntryStore, LineItem

__all__ = [
    "CatalogItem",
    "InventoryCatalog",
    "EntryKind",
    "LedgerEntry",
    "LedgerEntryStore",
    "LineItem",
]
