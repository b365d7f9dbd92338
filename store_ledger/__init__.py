"""
store_ledger: credit ledger for a small shop.

Records goods sold on credit and cash payments received, keeps a catalog of
goods with default prices, and derives a running balance per customer.
"""
from __future__ import annotations

from .errors import DomainError, NotFoundError, PersistenceError, ValidationError
from .session import LedgerSession, open_session

__version__ = "1.0.0"

__all__ = [
    "DomainError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "LedgerSession",
    "open_session",
    "__version__",
]
